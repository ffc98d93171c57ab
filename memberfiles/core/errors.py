"""Exception hierarchy for memberfiles.

A denied request is not an error: it is an ``AuthorizationResult`` with
``authorized=False``. The exceptions here signal faults in the data handed
to the authorizer and must never be turned into an allow or a deny.
"""


class MemberFilesError(Exception):
    """Base class for all memberfiles errors."""


class AccessFaultError(MemberFilesError):
    """The authorizer could not evaluate the request."""


class AccessConfigurationError(AccessFaultError):
    """A visibility, object type or role value is outside the closed set."""


class UnknownVisibilityError(AccessConfigurationError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"Unknown file visibility: {value!r}")


class UnknownObjectTypeError(AccessConfigurationError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"Unknown file object type: {value!r}")


class UnknownRoleError(AccessConfigurationError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"Unknown requester role: {value!r}")


class MalformedInputError(AccessFaultError):
    """A requester or file is missing data the decision depends on."""
