"""Runtime configuration for return notification service."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings loaded from environment variables."""

    service_name: str = "return-notification-service"
    service_version: str = "0.1.0"
    log_level: str = "INFO"
    metrics_enabled: bool = True

    reseller_email_from: str = "contractor@example.com"
    permitted_emails_csv: str = "returns-desk@example.com,returns-lead@example.com"

    model_config = SettingsConfigDict(env_prefix="RETURN_NOTIFICATION_", extra="ignore")

    @property
    def permitted_emails(self) -> list[str]:
        emails = [email.strip() for email in self.permitted_emails_csv.split(",")]
        return [email for email in emails if email]


def get_settings() -> Settings:
    """Return settings object."""

    return Settings()
