"""Error types shared by the risk services."""


class RiskInputError(ValueError):
    """Malformed or missing caller input (bad coordinates, short routes, bad filters)."""

    pass


class UpstreamServiceError(Exception):
    """An external collaborator failed or returned data we cannot use."""

    pass
