from pathlib import Path


def get_project_root() -> Path:
    """Returns the project root directory by finding the parent of the ring_to_tv package."""
    # This file is in ring_to_tv/utils/paths.py
    current_file = Path(__file__).resolve()

    return current_file.parent.parent.parent.resolve()


def get_shared_data_path() -> Path:
    """Returns the path to the shared_data directory."""
    path = get_project_root() / "shared_data"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_error_image_path() -> Path:
    """Returns the placeholder image sent when a snapshot could not be taken."""
    return Path(__file__).resolve().parent.parent / "assets" / "error.png"
