"""Configuración central de la aplicación (Pydantic Settings).

- Carga variables desde .env en la raíz del proyecto.
- Agrupa ajustes por área: App, CORS, Mongo, Servidor.
"""
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resuelve el .env ubicado en la raíz del proyecto (independiente del CWD)
ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    """Conjunto de variables de configuración con valores por defecto razonables.

    Nota: los valores pueden sobreescribirse vía variables de entorno (.env).
    """
    # App
    app_name: str = "Notes API"
    api_prefix: str = "/api"
    environment: str = Field(
        "development",
        validation_alias=AliasChoices("APP_ENV", "ENVIRONMENT", "NODE_ENV"),
    )

    # CORS: localhost siempre se acepta; aquí van los dominios desplegados
    cors_origins: list[str] = ["https://notesapp-steel.vercel.app"]

    # Mongo
    mongodb_uri: str | None = Field(
        None,
        validation_alias=AliasChoices("MONGODB_URI", "MONGO_URI"),
    )
    mongo_db: str = "notesapp"  # si la URI no trae base por defecto
    mongo_timeout_ms: int = 5000
    mongo_tls_insecure: bool = False  # dev only

    # Servidor
    port: int = 3000
    log_level: str = "INFO"
    static_dir: str = "public"

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("cors_origins")
    @classmethod
    def _strip_trailing_slash(cls, v: list[str]) -> list[str]:
        # Un origen nunca termina en '/'; así "https://x.app/" también coincide
        return [o.strip().rstrip("/") for o in (v or []) if o and o.strip()]

    # --- Utilidades derivadas / helpers ---
    @property
    def api_prefix_normalized(self) -> str:
        """Devuelve `api_prefix` con formato consistente.

        - Siempre inicia con '/'
        - Sin '/' final (excepto cuando es solo '/')
        - Si está vacío, devuelve ""
        """
        pref = (self.api_prefix or "").strip()
        if not pref:
            return ""
        if not pref.startswith('/'):
            pref = '/' + pref
        if len(pref) > 1 and pref.endswith('/'):
            pref = pref[:-1]
        return pref

    @property
    def is_development(self) -> bool:
        # Cualquier otro valor (production, staging, test...) cuenta como no-dev
        return self.environment.strip().lower() == "development"


settings = Settings()
