"""Default values used when building a client configuration."""

DEFAULT_TEST_HOST = "test.deribit.com"
DEFAULT_PROD_HOST = "www.deribit.com"
DEFAULT_TEST_PORT = 9881
DEFAULT_PROD_PORT = 9880
DEFAULT_SSL_PORT = 9883
DEFAULT_HEARTBEAT_INTERVAL = 30
DEFAULT_CONNECTION_TIMEOUT_SECS = 10
DEFAULT_RECONNECT_ATTEMPTS = 3
DEFAULT_RECONNECT_DELAY_SECS = 5
DEFAULT_LOG_LEVEL = "info"
DEFAULT_SENDER_COMP_ID = "CLIENT"
DEFAULT_TARGET_COMP_ID = "DERIBITSERVER"