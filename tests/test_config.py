from sqlalchemy import make_url

from rowcycle.config import _mysql_url_from_parts, _normalize_database_url


def test_mysql_parts_build_pymysql_url():
    url = make_url(_mysql_url_from_parts("mysql", "root", "p@ss:word", "app", "3307"))

    assert url.drivername == "mysql+pymysql"
    assert url.host == "mysql"
    assert url.port == 3307
    assert url.username == "root"
    assert url.password == "p@ss:word"
    assert url.database == "app"


def test_mysql_parts_default_port():
    url = make_url(_mysql_url_from_parts("db", "user", "secret", "demo", None))
    assert url.port == 3306

    url = make_url(_mysql_url_from_parts("db", "user", "secret", "demo", "not-a-port"))
    assert url.port == 3306


def test_mysql_parts_need_a_host():
    assert _mysql_url_from_parts(None, "root", "pw", "app", "3306") is None
    assert _mysql_url_from_parts("  ", "root", "pw", "app", "3306") is None


def test_normalize_forces_installed_drivers():
    assert _normalize_database_url("mysql://u:p@h/db", "sqlite://") == "mysql+pymysql://u:p@h/db"
    assert _normalize_database_url("postgres://u:p@h/db", "sqlite://") == "postgresql+psycopg2://u:p@h/db"
    assert _normalize_database_url("'sqlite:///x.db'", "sqlite://") == "sqlite:///x.db"
    assert _normalize_database_url("", "sqlite:///fallback.db") == "sqlite:///fallback.db"
