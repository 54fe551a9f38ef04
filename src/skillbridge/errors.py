class SkillBridgeError(Exception):
    pass

class ConfigError(SkillBridgeError):
    pass

class VerificationFailure(SkillBridgeError):
    """Signature or certificate chain of an inbound request did not check out."""

class MalformedBody(SkillBridgeError):
    """Request body is not JSON or is not a JSON object."""

class UpstreamFailure(SkillBridgeError):
    """The generative-language API could not produce an answer."""

class NetworkError(UpstreamFailure):
    pass

class DecodeError(UpstreamFailure):
    pass

class MissingApiKey(UpstreamFailure):
    pass
