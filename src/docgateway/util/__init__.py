from .mime import (
    DIRECTORY_MIME,
    DRIVE_FOLDER_MIME,
    guess_mime_type,
    is_directory_mime,
    is_download_disallowed,
    is_google_app,
)
from .uri import (
    DocumentUri,
    build_document_uri,
    build_document_uri_using_tree,
    build_tree_uri,
    get_document_id,
    get_tree_document_id,
    is_blank,
    is_tree_uri,
)

__all__ = [
    "DocumentUri",
    "build_document_uri",
    "build_document_uri_using_tree",
    "build_tree_uri",
    "get_document_id",
    "get_tree_document_id",
    "is_blank",
    "is_tree_uri",
    "DIRECTORY_MIME",
    "DRIVE_FOLDER_MIME",
    "guess_mime_type",
    "is_directory_mime",
    "is_download_disallowed",
    "is_google_app",
]
