"""
Language settings schemas
"""
from typing import List

from pydantic import BaseModel, Field, field_validator, model_validator


class AvailableLanguage(BaseModel):
    code: str
    name: str
    native: str


AVAILABLE_LANGUAGES = [
    AvailableLanguage(code=code, name=name, native=native)
    for code, name, native in (
        ("id", "Indonesian", "Bahasa Indonesia"),
        ("en", "English", "English"),
        ("es", "Spanish", "Español"),
        ("fr", "French", "Français"),
        ("de", "German", "Deutsch"),
        ("pt", "Portuguese", "Português"),
        ("zh", "Chinese", "中文"),
        ("ja", "Japanese", "日本語"),
        ("ar", "Arabic", "العربية"),
        ("ru", "Russian", "Русский"),
        ("it", "Italian", "Italiano"),
        ("nl", "Dutch", "Nederlands"),
        ("pl", "Polish", "Polski"),
        ("tr", "Turkish", "Türkçe"),
        ("vi", "Vietnamese", "Tiếng Việt"),
        ("th", "Thai", "ไทย"),
        ("ko", "Korean", "한국어"),
        ("hi", "Hindi", "हिन्दी"),
        ("ms", "Malay", "Bahasa Melayu"),
    )
]

LANGUAGE_CODE = r"^[a-z]{2}$"


class LanguageSettingsUpdate(BaseModel):
    default_language: str = Field(..., pattern=LANGUAGE_CODE)
    supported_languages: List[str] = Field(..., min_length=1)

    class Config:
        extra = "forbid"

    @field_validator("default_language", mode="before")
    @classmethod
    def lower_default(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("supported_languages")
    @classmethod
    def check_codes(cls, v: List[str]) -> List[str]:
        codes = []
        for code in (item.strip().lower() for item in v):
            if len(code) != 2 or not code.isalpha():
                raise ValueError("Language code must be 2 characters")
            if code not in codes:
                codes.append(code)
        return codes

    @model_validator(mode="after")
    def check_default_supported(self):
        if self.default_language not in self.supported_languages:
            raise ValueError("Default language must be in supported languages")
        return self


class LanguageSettings(BaseModel):
    default_language: str
    supported_languages: List[str]
    available_languages: List[AvailableLanguage] = []
