from __future__ import annotations


class MirrorValidationError(ValueError):
    pass


class MirrorNotFoundError(RuntimeError):
    pass


class MirrorExistsError(RuntimeError):
    pass


class StoreError(RuntimeError):
    pass


class RelayDeliveryError(RuntimeError):
    pass
