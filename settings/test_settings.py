import logging
from unittest.mock import Mock

from app.environment import EnvironmentName


class TestSettings(Mock):
    environment = EnvironmentName.TESTING
    public_url = "https://api.mailflow.test"
    app_origin = "https://app.mailflow.test"
    token_encryption_key = "bWFpbGZsb3ctdGVzdC10b2tlbi1rZXktMzJieXRlcyE="

    auth = Mock(
        url="https://auth.mailflow.test",
        jwt_secret="test-jwt-secret-for-mailflow-sessions",
        jwt_audience="authenticated",
    )
    database = Mock(
        async_host="postgresql+asyncpg://localhost:5432",
        dsn="postgresql://localhost:5432/mailflow_test",
        min_pool_size=1,
        max_pool_size=2,
    )
    database.name = "mailflow_test"
    google = Mock(client_id="test-google-client-id", client_secret="test-google-client-secret")
    http = Mock(timeout=5)
    logging = Mock(level=logging.INFO, use_config=False, use_pretty_json=False)
    mailer = Mock(
        api_key="re_test_key",
        api_url="https://mailer.mailflow.test/emails",
        sender="MailFlow <onboarding@resend.dev>",
        timeout=5,
    )
    microsoft = Mock(client_id="test-microsoft-client-id", client_secret="test-microsoft-client-secret")
    sentry = Mock(is_enabled=False, dsn=None)
