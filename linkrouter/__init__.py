"""Choose which browser, profile or app opens a link: config, rules, profiles and picker model."""

__version__ = "0.7.0"