from importlib.metadata import PackageNotFoundError, version


def get_version() -> str:
    try:
        return version("photo-sort")
    except PackageNotFoundError:
        # Source checkout without an install
        return "0.1.0"
