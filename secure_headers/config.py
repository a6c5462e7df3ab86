from pydantic_settings import BaseSettings, SettingsConfigDict

from secure_headers.schemas.options import SecureHeadersOptions, load_options


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "secure-headers-nonce"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Server
    # Dev server only, bind to localhost unless HOST says otherwise
    HOST: str = "127.0.0.1"
    PORT: int = 5173
    ROOT_DIR: str = "."  # Directory served in the serve phase

    # Build
    OUT_DIR: str = "./dist"  # Output directory rewritten in the build phase

    # Plugin option overrides
    CSP_REPORT_ONLY: bool = False
    CSP_PROCESS_I18N: bool = False
    CSP_NONCE_PLACEHOLDER: str = "NONCE_PLACEHOLDER"
    CSP_BUNDLE_SHIM: bool = True

    def plugin_options(self, **overrides) -> SecureHeadersOptions:
        """Build plugin options from the environment, then apply overrides."""
        return load_options(
            {
                "report_only": self.CSP_REPORT_ONLY,
                "process_i18n": self.CSP_PROCESS_I18N,
                "nonce_placeholder": self.CSP_NONCE_PLACEHOLDER,
                "bundle_shim": self.CSP_BUNDLE_SHIM,
            },
            **overrides,
        )

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=True, extra="ignore"
    )


settings = Settings()
