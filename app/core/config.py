from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    TENANT_ID: str = "pg.citya"

    CHB_BASE_URL: str = "http://localhost:8080"
    CHB_AUTH_TOKEN: str | None = None
    MDMS_BASE_URL: str | None = None  # defaults to CHB_BASE_URL
    HTTP_TIMEOUT_SECONDS: float = 10.0

    CONSTRAINED_VIEWPORT: bool = False
    DEFAULT_PAGE_SIZE: int = 10
    SEARCH_FENCING_ENABLED: bool = False

    PAYMENT_COLLECT_ROUTE: str = "/digit-ui/employee/payment/collect/chb-services/{booking_no}"
    BOOKING_DETAILS_ROUTE: str = "/digit-ui/employee/chb/applicationsearch/application-details/{booking_no}"


settings = Settings()
