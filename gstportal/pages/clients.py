from __future__ import annotations

from ._shared import *
from gstportal.services.client_import import import_clients
from gstportal.services.clients import create_client, delete_client, list_clients, update_client

_CLIENT_FIELDS = (
    ("name", "Name"),
    ("address", "Address"),
    ("email", "Email"),
    ("phone", "Phone"),
    ("abn", "ABN"),
    ("notes", "Notes"),
)


def render_clients() -> None:
    with ui.dialog() as editor, gp_card(classes="w-[min(560px,95vw)]"):
        editor_title = ui.label("").classes(STYLE_SECTION_TITLE)
        inputs = {
            key: (ui.textarea(label) if key in ("address", "notes") else ui.input(label))
            .props("outlined dense")
            .classes(STYLE_INPUT)
            for key, label in _CLIENT_FIELDS
        }
        editing: dict[str, int | None] = {"id": None}

        def save() -> None:
            payload = {key: field.value for key, field in inputs.items()}
            try:
                if editing["id"] is None:
                    client = create_client(payload)
                else:
                    client = update_client(editing["id"], payload)
            except PortalError as exc:
                notify_error(exc)
                return
            ui.notify(f"Client {client.name} saved", color="green")
            editor.close()
            table.refresh()

        with ui.row().classes("w-full justify-end gap-2 mt-3"):
            gp_btn_secondary("Cancel", on_click=editor.close)
            gp_btn_primary("Save", on_click=save)

    def open_editor(client=None) -> None:
        editing["id"] = int(client.id) if client is not None else None
        editor_title.text = "Edit client" if client is not None else "New client"
        for key, field in inputs.items():
            field.value = getattr(client, key, "") if client is not None else ""
        editor.open()

    async def handle_upload(e) -> None:
        content = await e.file.read()
        filename = e.file.name or ""
        try:
            count, err = import_clients(content, filename)
        except PortalError as exc:
            notify_error(exc)
            return
        if err:
            ui.notify(err, color="red")
            return
        ui.notify(f"{count} clients imported", color="green")
        table.refresh()

    with ui.row().classes("w-full items-center justify-between mb-4 flex-col sm:flex-row gap-3"):
        ui.label("Clients").classes(STYLE_PAGE_TITLE)
        with ui.row().classes("gap-2 items-center"):
            ui.upload(label="Import CSV/Excel", auto_upload=True, on_upload=handle_upload).props(
                "flat dense accept=.csv,.xls,.xlsx"
            ).classes("w-56")
            gp_btn_primary("New", icon="add", on_click=lambda: open_editor())

    @ui.refreshable
    def table() -> None:
        try:
            clients = list_clients()
        except PortalError as exc:
            notify_error(exc)
            return
        with gp_card(pad="p-0", classes="overflow-hidden"):
            with ui.row().classes(STYLE_TABLE_HEADER):
                ui.label("Name").classes("flex-1")
                ui.label("Email").classes("w-56")
                ui.label("Phone").classes("w-36")
                ui.label("ABN").classes("w-36")
                ui.label("").classes("w-20")
            if not clients:
                with ui.row().classes(STYLE_TABLE_ROW):
                    ui.label("No clients yet").classes(STYLE_TEXT_MUTED)
                return
            for c in clients:

                def remove(client_id: int = int(c.id), name: str = c.name) -> None:
                    def _do_delete() -> None:
                        try:
                            delete_client(client_id)
                        except PortalError as exc:
                            notify_error(exc)
                            return
                        ui.notify(f"Client {name} deleted", color="green")
                        table.refresh()

                    confirm_dialog(
                        "Delete client?",
                        f"{name} will be removed. Existing documents keep their copy of the details.",
                        _do_delete,
                    ).open()

                with ui.row().classes(STYLE_TABLE_ROW + " items-center"):
                    ui.label(c.name).classes("flex-1 font-medium text-slate-900")
                    ui.label(c.email or "-").classes("w-56 text-slate-600")
                    ui.label(c.phone or "-").classes("w-36 text-slate-600")
                    ui.label(c.abn or "-").classes("w-36 text-slate-600")
                    with ui.row().classes("w-20 gap-0 justify-end"):
                        ui.button(icon="edit", on_click=lambda x=c: open_editor(x)).props("flat dense round")
                        ui.button(icon="delete", on_click=remove).props("flat dense round color=negative")

    table()
