"""Setup configuration for drive_upload_bridge package."""
import re
from pathlib import Path

from setuptools import find_packages, setup

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and
                    not line.startswith("#")]

# Read version from __init__.py
init_file = Path(__file__).parent / "src" / "drive_upload_bridge" / "__init__.py"
version_match = re.search(r'^__version__\s*=\s*[\'\"]([\w\.-]+)[\'"]',
                          init_file.read_text(encoding="utf-8"), re.MULTILINE)
if not version_match:
    raise RuntimeError(f"Unable to find version string in {init_file}")
version = version_match.group(1)

setup(
    name="drive_upload_bridge",
    version=version,
    description="Server-side bridge uploading form attachments to Google Drive "
    "with a service account",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.11",
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.4"],
    },
    entry_points={
        "console_scripts": [
            "drive-upload-bridge=drive_upload_bridge.cli:run",
        ],
    },
)
