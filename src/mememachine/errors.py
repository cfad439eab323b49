class MemeMachineError(Exception):
    """Base class for all Meme Machine errors."""


class UpstreamError(MemeMachineError):
    def __init__(self, service: str, detail: str) -> None:
        super().__init__(
            f"The {service} service could not be reached.\n"
            f"  Cause: {detail}\n"
            f"  Check: Is the network up? Is MEMEMACHINE_FRINKIAC_URL pointing at a live host?"
        )
        self.service = service
        self.detail = detail


class UpstreamFormatError(MemeMachineError):
    def __init__(self, service: str, detail: str) -> None:
        super().__init__(
            f"The {service} service returned a response that could not be understood.\n"
            f"  Cause: {detail}"
        )
        self.service = service
        self.detail = detail


class InvalidImageUrlError(MemeMachineError):
    def __init__(self, url: str, allowed_prefix: str) -> None:
        super().__init__(
            f"Refusing to download '{url}'.\n"
            f"  Cause: only rendered images under {allowed_prefix} can be saved.\n"
            f"  Tip: Copy the meme URL printed by `mememachine search` or `mememachine show`."
        )
        self.url = url
        self.allowed_prefix = allowed_prefix


class ImageSaveError(MemeMachineError):
    def __init__(self, dest: str, detail: str) -> None:
        super().__init__(
            f"Could not write the image to {dest}.\n"
            f"  Cause: {detail}\n"
            f"  Check: Does the parent directory exist, and is it writable?"
        )
        self.dest = dest
        self.detail = detail


class SearchFailedError(MemeMachineError):
    def __init__(self, scenario: str, detail: str) -> None:
        super().__init__(
            f"Something went wrong while searching for \"{scenario}\".\n"
            f"  Cause: {detail}\n"
            f"  Tip: Re-run with --verbose to see the full log."
        )
        self.scenario = scenario
        self.detail = detail
