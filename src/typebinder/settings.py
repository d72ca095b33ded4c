from typing import Optional, Tuple, Type

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)


class ExportSettings(BaseSettings):
    """Top-level settings for an export run."""

    model_config = SettingsConfigDict(env_prefix="TYPEBINDER_")

    input_file: Optional[str] = Field(
        default=None,
        description="The root source file to export. Required by the file pipeline.",
    )
    output_dir: Optional[str] = Field(
        default=None,
        description=(
            "Directory receiving one generated file per module. "
            "If None, generated modules are printed to stdout."
        ),
    )
    path_map_file: Optional[str] = Field(
        default=None,
        description=(
            "Optional JSON file mapping module paths (e.g. `api::models`) "
            "to output locations relative to `output_dir`."
        ),
    )
    optional_wrapper: str = Field(
        default="Option",
        description=(
            "Identifier of the wrapper type that turns a field into an optional "
            "property (`field?: T`) instead of a nullable one."
        ),
    )
    require_serialize_derive: bool = Field(
        default=False,
        description="If True, only structs and enums deriving `Serialize` are exported.",
    )
    follow_modules: bool = Field(
        default=True,
        description=(
            "If True, bodiless `mod name;` declarations are loaded from disk. "
            "If False, they are skipped."
        ),
    )
    file_extension: str = Field(
        default=".ts",
        description="Extension of the generated files.",
    )


def load_settings(
    env_prefix: Optional[str] = None,
    env_file: Optional[str] = None,
    toml_file: Optional[str] = None,
    json_file: Optional[str] = None,
    **kwargs,
) -> ExportSettings:
    """
    Build settings from keyword arguments, the environment and optional
    env/toml/json files. Keyword arguments win over every other source.
    """
    config_dict = SettingsConfigDict(
        env_prefix=env_prefix if env_prefix is not None else "TYPEBINDER_",
        env_file=env_file,
        toml_file=toml_file,
        json_file=json_file,
    )

    class Settings(ExportSettings):
        model_config = config_dict

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: Type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,
            file_secret_settings: PydanticBaseSettingsSource,
        ) -> Tuple[PydanticBaseSettingsSource, ...]:
            sources = [init_settings, env_settings, dotenv_settings]
            if toml_file:
                sources.append(TomlConfigSettingsSource(settings_cls))
            if json_file:
                sources.append(JsonConfigSettingsSource(settings_cls))
            sources.append(file_secret_settings)
            return tuple(sources)

    return Settings(**kwargs)
