from pydantic import BaseModel
import os


class Settings(BaseModel):
    # Auth/JWT
    JWT_SECRET: str = os.getenv('STORE_JWT_SECRET', 'devsecret')
    JWT_ALGORITHM: str = os.getenv('STORE_JWT_ALGORITHM', 'HS256')
    ACCESS_TOKEN_EXPIRES_SECONDS: int = int(os.getenv('STORE_ACCESS_TOKEN_EXPIRES_SECONDS', '3600'))

    # Password hashing
    PASSWORD_MIN_LENGTH: int = 6


settings = Settings()
