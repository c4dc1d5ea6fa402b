"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    INVALID_INPUT = 3


class KnownFolders(Enum):
    """Top-level package folders that may carry a framework segment.

    Args:
        Enum (string): Folder names as they appear in package paths.
    """

    CONTENT = "content"
    BUILD = "build"
    BUILD_CROSS_TARGETING = "buildCrossTargeting"
    BUILD_TRANSITIVE = "buildTransitive"
    TOOLS = "tools"
    CONTENT_FILES = "contentFiles"
    LIB = "lib"
    NATIVE = "native"
    RUNTIMES = "runtimes"
    REF = "ref"
    ANALYZERS = "analyzers"
    SOURCE = "src"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    PACKAGE_EXTENSION = ".nupkg"
    SNUPKG_EXTENSION = ".snupkg"
    MANIFEST_EXTENSION = ".nuspec"
    SYMBOLS_EXTENSION = ".symbols.nupkg"
    README_EXTENSION = ".md"
    REFERENCE_ASSEMBLY_EXTENSIONS = [".dll", ".exe", ".winmd"]
    LICENSE_FILE_EXTENSIONS = [".txt", ".md", ""]
    ICON_FILE_EXTENSIONS = [".png", ".jpg", ".jpeg"]

    MAX_PACKAGE_ID_LENGTH = 100
    MAX_ICON_FILE_SIZE = 1024 * 1024
    PARSE_CACHE_MAX_ENTRIES = 500
    MAX_PORTABLE_PROFILE_ARITY = 8

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "TFMKIT_LOG_LEVEL"
    ENV_LOG_FILE = "TFMKIT_LOG_FILE"
    DEFAULT_LOG_LEVEL = "INFO"

    DEFAULT_CONFIG_PATHS = [
        "./tfmkit.yml",
        "./tfmkit.yaml",
        "~/.config/tfmkit/tfmkit.yml",
    ]

    # Packaging (OPC) constants
    RELATIONSHIP_TYPE_MANIFEST = "http://schemas.microsoft.com/packaging/2010/07/manifest"
    RELATIONSHIP_TYPE_CORE_PROPERTIES = (
        "http://schemas.openxmlformats.org/package/2006/relationships/metadata/core-properties"
    )
    RELATIONSHIPS_NAMESPACE = "http://schemas.openxmlformats.org/package/2006/relationships"
    CONTENT_TYPES_NAMESPACE = "http://schemas.openxmlformats.org/package/2006/content-types"
    CORE_PROPERTIES_NAMESPACE = (
        "http://schemas.openxmlformats.org/package/2006/metadata/core-properties"
    )
    DC_NAMESPACE = "http://purl.org/dc/elements/1.1/"
    DCTERMS_NAMESPACE = "http://purl.org/dc/terms/"
    XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
    RELATIONSHIP_CONTENT_TYPE = "application/vnd.openxmlformats-package.relationships+xml"
    CORE_PROPERTIES_CONTENT_TYPE = "application/vnd.openxmlformats-package.core-properties+xml"
    DEFAULT_CONTENT_TYPE = "application/octet"
    PACKAGE_RELATIONSHIP_PATH = "_rels/.rels"
    CONTENT_TYPES_PATH = "[Content_Types].xml"
    CORE_PROPERTIES_DIR = "package/services/metadata/core-properties/"
    CREATOR = "tfmkit"

    LICENSE_DEPRECATION_URL = "https://aka.ms/deprecateLicenseUrl"
    LICENSE_SERVICE_URL = "https://licenses.nuget.org/"
    EMPTY_FOLDER_MARKER = "_._"
    SYMBOLS_PACKAGE_TYPE = "SymbolsPackage"
