class BiDashboardError(Exception):
    """Base exception for all bi_dashboard errors"""
    pass

class ConfigError(BiDashboardError):
    """Invalid or inconsistent global.json / dataset config"""
    pass

class IngestionError(BiDashboardError):
    """
    A dataset could not be turned into rows + column names:
    unreachable source, malformed content, missing header, etc
    """
    pass

class SourceNotFoundError(IngestionError):
    """The source file or URL does not exist (missing path, HTTP 404)"""
    pass

class MissingHeaderError(IngestionError):
    """The source parsed but no header row / column names could be found"""
    pass

class ContentTypeMismatchError(IngestionError):
    """The source is not delimited text (e.g. an HTML error page)"""
    pass
