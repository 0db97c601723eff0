import secrets

from mindlink.errors import PromptUnavailable


class PromptSource:
    """Supplies the image shown to both players at the start of a round.

    ``fetch`` may block on I/O and raises ``PromptUnavailable`` on failure.
    """

    def fetch(self) -> str:
        raise NotImplementedError


class PicsumPromptSource(PromptSource):
    """Random Lorem Picsum image; the token defeats browser and CDN caching."""

    def __init__(self, url_template='https://picsum.photos/400/300?random={token}'):
        self.url_template = url_template

    def fetch(self) -> str:
        try:
            return self.url_template.format(token=secrets.token_hex(8))
        except (KeyError, IndexError, ValueError) as exc:
            raise PromptUnavailable(f'Bad prompt URL template: {exc}') from exc
