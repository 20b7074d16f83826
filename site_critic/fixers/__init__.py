"""Targeted fixers, one per issue kind, and the registry that dispatches to them."""

from .base import BaseFixer, FixResult, LandingPageFixer, SiteFixer
from .brand import (
    BrandStoryFixer,
    GenericPhrasingFixer,
    LogoFixer,
    PlaceholderCopyFixer,
    PlaceholderImageryFixer,
)
from .discoverability import (
    AltTextFixer,
    MetaDescriptionFixer,
    SchemaFixer,
    TitleFixer,
    TitleLengthFixer,
)
from .persuasion import (
    CallToActionFixer,
    ContactBlockFixer,
    ContactFormFixer,
    SocialProofFixer,
)
from .registry import FixerRegistry
from .structure import (
    FooterFixer,
    HeadingSkipFixer,
    LangFixer,
    MissingH1Fixer,
    MultipleH1Fixer,
    NavigationFixer,
    ViewportFixer,
)
from .visual import (
    BaseStylesheetFixer,
    ColorPaletteFixer,
    FontConsolidationFixer,
    ImageryFixer,
    ResponsiveFixer,
)


def default_fixers() -> list[BaseFixer]:
    """One instance of every built-in fixer."""
    return [
        MissingH1Fixer(),
        MultipleH1Fixer(),
        HeadingSkipFixer(),
        NavigationFixer(),
        FooterFixer(),
        ViewportFixer(),
        LangFixer(),
        PlaceholderCopyFixer(),
        ContactBlockFixer(),
        CallToActionFixer(),
        SocialProofFixer(),
        ContactFormFixer(),
        TitleFixer(),
        TitleLengthFixer(),
        MetaDescriptionFixer(),
        SchemaFixer(),
        AltTextFixer(),
        BaseStylesheetFixer(),
        ColorPaletteFixer(),
        FontConsolidationFixer(),
        ResponsiveFixer(),
        ImageryFixer(),
        GenericPhrasingFixer(),
        PlaceholderImageryFixer(),
        BrandStoryFixer(),
        LogoFixer(),
    ]


def create_default_registry() -> FixerRegistry:
    """Registry holding every built-in fixer."""
    return FixerRegistry(default_fixers())


__all__ = [
    "AltTextFixer",
    "BaseFixer",
    "BaseStylesheetFixer",
    "BrandStoryFixer",
    "CallToActionFixer",
    "ColorPaletteFixer",
    "ContactBlockFixer",
    "ContactFormFixer",
    "FixResult",
    "FixerRegistry",
    "FontConsolidationFixer",
    "FooterFixer",
    "GenericPhrasingFixer",
    "HeadingSkipFixer",
    "ImageryFixer",
    "LandingPageFixer",
    "LangFixer",
    "LogoFixer",
    "MetaDescriptionFixer",
    "MissingH1Fixer",
    "MultipleH1Fixer",
    "NavigationFixer",
    "PlaceholderCopyFixer",
    "PlaceholderImageryFixer",
    "ResponsiveFixer",
    "SchemaFixer",
    "SiteFixer",
    "SocialProofFixer",
    "TitleFixer",
    "TitleLengthFixer",
    "ViewportFixer",
    "create_default_registry",
    "default_fixers",
]
