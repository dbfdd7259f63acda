"""Custom signals for the external sync app.

Signals:
    project_synced: Sent after a project is created or updated from the
        external datastore.
        Sender: The ``ExternalSyncService`` class.
        Kwargs:
            project: The local ``Project`` instance.
            action: ``"created"`` or ``"updated"``.
"""

from django.dispatch import Signal

project_synced = Signal()
