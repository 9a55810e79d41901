from .extract import SUPPORTED_EXTENSIONS, extract_text, is_supported_file_format

__all__ = ["SUPPORTED_EXTENSIONS", "extract_text", "is_supported_file_format"]
