import pytest

from stores import InMemoryOrderStore, SqlOrderStore, build_order_store
from utils.config import Settings, get_settings
from utils.feature_flags import USE_NEW_TAX_CALCULATION, EnvFeatureFlags


class TestEnvFeatureFlags:

    def test_defaults_to_current_policy(self, monkeypatch):
        monkeypatch.delenv(USE_NEW_TAX_CALCULATION, raising=False)
        assert EnvFeatureFlags().is_reform_tax_enabled() is False

    @pytest.mark.parametrize("value", ["true", "True", "1", "yes", "ON"])
    def test_truthy_values_enable_reform(self, monkeypatch, value):
        monkeypatch.setenv(USE_NEW_TAX_CALCULATION, value)
        assert EnvFeatureFlags().is_reform_tax_enabled() is True

    @pytest.mark.parametrize("value", ["false", "0", "no", ""])
    def test_other_values_keep_current_policy(self, monkeypatch, value):
        monkeypatch.setenv(USE_NEW_TAX_CALCULATION, value)
        assert EnvFeatureFlags().is_reform_tax_enabled() is False

    def test_flag_is_reread_on_every_call(self, monkeypatch):
        flags = EnvFeatureFlags()
        monkeypatch.setenv(USE_NEW_TAX_CALCULATION, "false")
        assert flags.is_reform_tax_enabled() is False
        monkeypatch.setenv(USE_NEW_TAX_CALCULATION, "true")
        assert flags.is_reform_tax_enabled() is True


class TestSettings:

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("API_PORT", "9001")
        monkeypatch.setenv("ORDER_STORE", "SQL")
        monkeypatch.setenv("DATABASE_URL", "sqlite://")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        settings = get_settings()
        assert settings.api_port == 9001
        assert settings.order_store == "sql"
        assert settings.database_url == "sqlite://"
        assert settings.log_level == "DEBUG"

    def test_memory_store_by_default(self):
        assert isinstance(build_order_store(Settings()), InMemoryOrderStore)

    def test_sql_store_when_configured(self, tmp_path):
        settings = Settings(order_store="sql", database_url=f"sqlite:///{tmp_path / 'orders.db'}")
        store = build_order_store(settings)
        assert isinstance(store, SqlOrderStore)
        assert (tmp_path / "orders.db").exists()
