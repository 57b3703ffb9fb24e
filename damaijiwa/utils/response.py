from fastapi.responses import HTMLResponse
from damaijiwa.schemas.base import SuccessResponse

OAUTH_SUCCESS_PAGE = """
<html>
  <body>
    <script>
      if (window.opener) {
        window.opener.postMessage({ type: 'OAUTH_AUTH_SUCCESS' }, '*');
        window.close();
      } else {
        window.location.href = '/';
      }
    </script>
    <p>Login berhasil. Menutup jendela...</p>
  </body>
</html>
"""

def success_response() -> SuccessResponse:
    return SuccessResponse(success=True)

def oauth_success_page() -> HTMLResponse:
    """Popup page that tells the opener window the login finished."""
    return HTMLResponse(content=OAUTH_SUCCESS_PAGE)
