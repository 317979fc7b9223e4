import logging
from pathlib import Path

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from config import SCOPES
from errors import CredentialsError

logger = logging.getLogger(__name__)


def authenticate(credentials_path: Path, token_path: Path) -> Credentials:
    """
    OAuth2 authentication. The first run opens a browser.
    The token is saved to ``token_path`` for the following runs; after a change
    of SCOPES the token file has to be removed.
    """
    creds = None

    if token_path.exists():
        creds = Credentials.from_authorized_user_file(str(token_path), SCOPES)

    if not creds or not creds.valid:
        if creds and creds.expired and creds.refresh_token:
            logger.debug("Refreshing token %s", token_path)
            creds.refresh(Request())
        else:
            if not credentials_path.exists():
                raise CredentialsError(
                    f"Client secret {credentials_path} not found; "
                    "download it from the Google Cloud Console"
                )

            logger.info("Opening a browser for authorization...")
            flow = InstalledAppFlow.from_client_secrets_file(
                str(credentials_path), SCOPES
            )
            creds = flow.run_local_server(port=0)

        token_path.parent.mkdir(parents=True, exist_ok=True)
        with open(token_path, "w") as f:
            f.write(creds.to_json())
        logger.debug("Token saved to %s", token_path)

    return creds
