from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv(override=True)

class Settings(BaseSettings):
    PROJECT_NAME: str = "Etched"
    # Application settings
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # SQLAlchemy database URL
    DATABASE_URL: str = "sqlite:///./etched.db"

    # Login configuration
    JWT_SECRET: str = "etched-dev-secret-change-in-production"
    ENCODE_ALGORITHM: str = "HS256"
    EMAIL_TOKEN_EXPIRE_SECONDS: int = 24 * 60 * 60  # 24 hours
    WALLET_TOKEN_EXPIRE_SECONDS: int = 12 * 60 * 60  # 12 hours
    NONCE_EXPIRY_SECONDS: int = 300  # 5 minutes, 0 = single use only
    BCRYPT_ROUNDS: int = 12

    # Admin wallets, comma separated
    ADMIN_WALLETS: str = "0x0000000000000000000000000000000000000000"
    # Seeded admin account, skipped when no password is configured
    ADMIN_EMAIL: str = "admin@admin.com"
    ADMIN_PASSWORD: str | None = None

    # Pools
    POOL_COST_ETH: float = 0.1
    POOL_CODE_MAX_ATTEMPTS: int = 10

    # Debug settings
    DEBUG: bool = False

    class Config:
        env_file = ".env"

    @property
    def admin_wallets(self) -> frozenset:
        return frozenset(
            w.strip().lower() for w in self.ADMIN_WALLETS.split(",") if w.strip()
        )

# Instantiate the settings
settings = Settings()
