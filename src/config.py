"""Configuration loader for the Study Guide Generator."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class AppInfo(BaseModel):
    """Application metadata."""

    name: str = "Study Guide Generator"
    version: str = "1.0.0"
    log_level: str = "INFO"


class ChunkingConfig(BaseModel):
    """Word-count chunk sizes used by the summary and question pipelines."""

    summary_chunk_size: int = 800
    max_summary_chunks: int = 5
    min_chunk_chars: int = 50
    excerpt_chars: int = 1000
    theoretical_chunk_size: int = 400
    application_chunk_size: int = 500
    numerical_chunk_size: int = 400
    mcq_chunk_size: int = 300


class SummaryConfig(BaseModel):
    """Summary length targets and condensation bounds."""

    min_text_chars: int = 100
    condense_min_len: int = 30
    condense_max_len: int = 150
    target_words: int = 500
    expansion_seed_chars: int = 500
    expansion_max_tokens: int = 400
    expansion_temperature: float = 0.3


class QuestionConfig(BaseModel):
    """Question bank generation settings."""

    count_per_type: int = 7
    true_bias: float = 0.7
    shuffle_options: bool = False
    seed: int | None = None
    max_workers: int = 6


class GenerationConfig(BaseModel):
    """External text generation provider configuration."""

    provider: str = "extractive"  # "extractive", "anthropic"
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 400
    temperature: float = 0.3


class UploadConfig(BaseModel):
    """Upload validation limits."""

    max_file_mb: int = 10
    allowed_extensions: list[str] = Field(default_factory=lambda: [".pdf"])


class StorageConfig(BaseModel):
    """Storage paths configuration."""

    sqlite_path: str = "./db/app.db"


class AppConfig(BaseModel):
    """Root application configuration."""

    app: AppInfo = Field(default_factory=AppInfo)
    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    summary: SummaryConfig = Field(default_factory=SummaryConfig)
    questions: QuestionConfig = Field(default_factory=QuestionConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    upload: UploadConfig = Field(default_factory=UploadConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    # API keys loaded from environment
    anthropic_api_key: str | None = None


def load_config(config_path: str | Path = "config.yaml") -> AppConfig:
    """Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Fully populated AppConfig instance.
    """
    load_dotenv()

    yaml_data: dict = {}
    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file) as f:
            yaml_data = yaml.safe_load(f) or {}

    config = AppConfig(**yaml_data)

    # Override from environment
    config.anthropic_api_key = os.getenv("ANTHROPIC_API_KEY")
    provider = os.getenv("STUDY_GUIDE_PROVIDER")
    if provider:
        config.generation.provider = provider

    return config
