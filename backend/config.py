from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "Vinyl Remaining Calculator"
    DATABASE_URL: str = "sqlite:///./vinyl_calc.db"
    LOG_LEVEL: str = "INFO"

    # Every persisted key is stored as "<namespace>.<name>", e.g. vinylCalc.savedRolls
    STORAGE_NAMESPACE: str = "vinylCalc"

    # Export file name: <prefix>_<YYYY-MM-DD>.csv
    CSV_FILENAME_PREFIX: str = "vinyl_rolls"

    class Config:
        env_file = ".env"


settings = Settings()
