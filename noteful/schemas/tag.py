"""Tags share the folder contract; the aliases keep route signatures readable."""

from noteful.schemas.folder import NamedEntityInput, NamedEntityResponse

TagInput = NamedEntityInput
TagResponse = NamedEntityResponse
