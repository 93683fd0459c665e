from modbundle.models import BundleSettings


class BaseProcesser:
    def __init__(self, settings: BundleSettings) -> None:
        self.settings = settings
