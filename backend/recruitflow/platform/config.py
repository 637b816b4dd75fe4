from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # Deployment environment
    DEPLOYMENT_ENV: str = "development"

    # Database
    DATABASE_URL: str = "sqlite:///./recruitflow.db"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Sentry
    SENTRY_DSN: Optional[str] = None

    # URLs
    FRONTEND_URL: str = "http://localhost:3000"
    # Optional comma-separated extra CORS origins
    CORS_EXTRA_ORIGINS: Optional[str] = None

    # Metric sets: weights of a round must sum to 1.0 within this tolerance
    METRIC_WEIGHT_TOLERANCE: float = 0.001

    # Deliberation votes accepted from members (comma-separated integers)
    DELIBS_VOTE_VALUES: str = "-10,-5,0,5,10"

    # What ApplicantRound.weighted_score caches:
    #   mean_of_submissions - mean of every submission's weighted average
    #   latest_submission   - weighted average of the newest submission only
    WEIGHTED_SCORE_MODE: str = "mean_of_submissions"

    @property
    def delibs_vote_values(self) -> list[int]:
        values: list[int] = []
        for raw in (self.DELIBS_VOTE_VALUES or "").split(","):
            raw = raw.strip()
            if not raw:
                continue
            values.append(int(raw))
        return values

    @property
    def cors_origins(self) -> list[str]:
        """FRONTEND_URL, the local dev servers, then any CORS_EXTRA_ORIGINS."""
        origins = [self.FRONTEND_URL, "http://localhost:5173", "http://localhost:3000"]
        for raw in (self.CORS_EXTRA_ORIGINS or "").split(","):
            raw = raw.strip()
            if raw and raw not in origins:
                origins.append(raw)
        return [o for o in origins if o]

    @property
    def is_production(self) -> bool:
        return (self.DEPLOYMENT_ENV or "").strip().lower() == "production"

    def model_post_init(self, __context) -> None:
        mode = (self.WEIGHTED_SCORE_MODE or "").strip().lower()
        if mode not in {"mean_of_submissions", "latest_submission"}:
            raise ValueError(
                "WEIGHTED_SCORE_MODE must be one of: mean_of_submissions, latest_submission"
            )
        self.WEIGHTED_SCORE_MODE = mode

    model_config = {
        "env_file": ".env",
        "extra": "ignore",
    }


settings = Settings()
