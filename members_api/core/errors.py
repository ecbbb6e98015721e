"""
Error taxonomy shared by the record store, the media uploader and the routes.

Each failure kind is its own exception type so that route handlers can map
it to a status code without inspecting message strings.
"""


class MembersApiError(Exception):
    """Base class for every error raised by the service's collaborators."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MemberValidationError(MembersApiError):
    """A required member field is missing, empty or malformed."""


class MemberNotFoundError(MembersApiError):
    """No member document matches the requested id."""

    def __init__(self, member_id: str, message: str = "Membro não encontrado"):
        super().__init__(message)
        self.member_id = member_id


class StoreError(MembersApiError):
    """The document store failed to answer a query or persist a write."""


class UploadError(MembersApiError):
    """The media host rejected the upload or could not be reached."""


class MissingFileError(UploadError):
    """The upload request carried no file, or an empty one."""

    def __init__(self, message: str = "Nenhum arquivo enviado."):
        super().__init__(message)
