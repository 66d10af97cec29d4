from __future__ import annotations

from .bas import render_bas
from .clients import render_clients
from .dashboard import render_dashboard
from .document_editor import render_document_editor
from .documents import render_documents
from .settings import render_settings

# Import routes for side effects. Registers @ui.page decorators
from . import auth
