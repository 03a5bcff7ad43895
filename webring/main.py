# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Webring Service
===============
Keeps an ordered ring of member sites, redirects visitors next / previous /
random around it, takes join applications and lets an admin review them.

Storage: participants.json and applications.json, on local disk
(USE_LOCAL_DATA=true) or in a GitHub repository.

Port: 3000
"""

from webring.application import create_app
from webring.core.config import settings

app = create_app(settings)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT, log_level="info")
