from chaingate.config import Settings


class TestSettings:
    def test_postgres_url_from_parts(self):
        s = Settings(db_host="db", db_port=5433, db_user="u", db_password="p", db_name="cg", database_url_override="")
        assert s.database_url == "postgresql+asyncpg://u:p@db:5433/cg"

    def test_override_wins(self):
        s = Settings(database_url_override="sqlite+aiosqlite:///cg.db")
        assert s.database_url == "sqlite+aiosqlite:///cg.db"

    def test_transaction_url(self):
        s = Settings(web_dapp_url="https://app.example/")
        assert s.transaction_url("abc") == "https://app.example/tx/abc"
