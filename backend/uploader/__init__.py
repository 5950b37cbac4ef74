"""
Cloud upload API: presigned-URL issuance for AWS S3, Azure Blob and GCS.
"""
__version__ = "0.1.0"
