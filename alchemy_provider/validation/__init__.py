from alchemy_provider.validation.presence import EntityPresenceVerifier

__all__ = ["EntityPresenceVerifier"]
