from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    COMPANY_NAME: str = ""
    SELLER_NAME: str = ""

    # Quotation defaults
    DEFAULT_VALID_DAYS: int = 7
    MAX_INSTALLMENTS: int = 12
    DEFAULT_WIDTH_M: float = 2.90
    DEFAULT_HEIGHT_M: float = 1.90
    DEFAULT_MEASURE_MESSAGE: str = (
        "As medidas informadas são nominais. O valor final será calculado "
        "com base na medição real das chapas no momento da retirada."
    )

    # Export
    EXPORT_DIR: str = "."
    CURRENCY_SYMBOL: str = "R$"

    class Config:
        env_file = ".env"


settings = Settings()
