"""Export, staging and transform operations.

Public API:
    Remote service:
        - ExportClient: start export, check status, download artifact
        - poll_export: wait for a job to produce its artifact

    Staging:
        - retrieve_artifact: download and unpack into the staging tree
        - extract_zip: safe zip extraction
        - clear_directory: empty a directory
        - prune_archives: drop archives from earlier runs

    Processing:
        - iter_files: lazy recursive file listing
        - AssetTransformer: minify-or-copy of one staged file
        - minify_file: minify one script or stylesheet
        - overlay_directory: copy one tree over another
"""

from wikibundle.operations.client import ExportClient
from wikibundle.operations.extract import clear_directory, extract_zip, prune_archives
from wikibundle.operations.minify import MinifyOptions, minify_file
from wikibundle.operations.overlay import overlay_directory
from wikibundle.operations.poll import poll_export
from wikibundle.operations.retrieve import retrieve_artifact
from wikibundle.operations.transform import AssetTransformer
from wikibundle.operations.walk import iter_files

__all__ = [
    # Remote service
    "ExportClient",
    "poll_export",
    # Staging
    "retrieve_artifact",
    "extract_zip",
    "clear_directory",
    "prune_archives",
    # Processing
    "iter_files",
    "AssetTransformer",
    "MinifyOptions",
    "minify_file",
    "overlay_directory",
]
