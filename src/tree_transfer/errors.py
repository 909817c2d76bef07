"""Exceptions raised by the transfer engine."""


class TransferError(Exception):
    """Base class for all structural transfer failures."""


class SourceNotFoundError(TransferError):
    """The source path does not exist."""
    
    def __init__(self, message: str = "Source path does not exist"):
        super().__init__(message)


class TargetNotFoundError(TransferError):
    """The target path does not exist."""
    
    def __init__(self, message: str = "Target path does not exist"):
        super().__init__(message)


class WalkError(TransferError):
    """A directory in the tree could not be enumerated."""


class ChecksumError(TransferError):
    """A file could not be read while computing its checksum."""


class ArchiveError(TransferError):
    """Creating, moving or extracting the transfer archive failed."""


class NoFilesCopiedError(TransferError):
    """Direct copy finished without copying a single file."""
    
    def __init__(self, message: str = "No files were copied"):
        super().__init__(message)


class TransferInProgressError(TransferError):
    """Another transfer is already writing to the same target."""
