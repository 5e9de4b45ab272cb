"""Exception hierarchy for the admission webhook."""


class AccessorError(Exception):
    """Base exception for admission errors"""


class AdmissionDecodeError(AccessorError):
    """Admission review or embedded object could not be decoded"""


class UnsupportedDialectError(AdmissionDecodeError):
    """Admission review apiVersion/kind is not served by this webhook"""


class ResolutionError(AccessorError):
    """Cluster state needed for a decision could not be read"""


class PolicyResolutionError(ResolutionError):
    """Accessor policies could not be listed"""


class ScopeResolutionError(ResolutionError):
    """Namespace or workspace could not be read"""

    def __init__(self, kind: str, name: str, message: str):
        self.kind = kind
        self.name = name
        super().__init__(message)


class ScopeNotFoundError(ScopeResolutionError):
    """Namespace or workspace does not exist"""

    def __init__(self, kind: str, name: str):
        super().__init__(kind, name, f'{kind} "{name}" not found')


class CertificateError(AccessorError):
    """Serving certificate could not be loaded"""
