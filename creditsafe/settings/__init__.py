from creditsafe.settings.main import CreditsafeSettings, GeneralSettings, LogSettings

__all__ = [
    "CreditsafeSettings",
    "GeneralSettings",
    "LogSettings",
]
