"""Gradio front end rendering the application shell."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Sequence

import gradio as gr

from legallens.errors import (
    AnalysisFailed,
    AnalysisPending,
    DocumentStateError,
    InvalidCredentials,
    LegalLensError,
    NotFound,
    UnknownDocument,
    UploadRejected,
)
from legallens.models import Analysis, Conversation, DocumentStats, DocumentSummary, UploadFile
from legallens.navigation.service import SIDEBAR, VIEWS
from legallens.services.notifications import Notification
from legallens.shell.app import ApplicationShell, Screen, create_shell

_RISK_BADGES = {"low": "🟢 low", "medium": "🟡 medium", "high": "🔴 high"}
_STATUS_BADGES = {"completed": "✅ completed", "processing": "⏳ processing", "error": "⚠️ error"}


def format_stats(stats: DocumentStats) -> str:
    return (
        f"**Total documents:** {stats.total} · **Completed analyses:** {stats.completed} · "
        f"**High risk:** {stats.high_risk} · **Processing:** {stats.processing}"
    )


def format_documents(documents: Sequence[DocumentSummary]) -> str:
    if not documents:
        return "No documents yet. Upload your first legal document to get started."
    lines = []
    for doc in documents:
        risk = _RISK_BADGES.get(doc.risk_level or "", "-")
        status = _STATUS_BADGES.get(doc.status, doc.status)
        lines.append(f"- **{doc.name}** ({doc.type}, {doc.uploaded_at:%Y-%m-%d}) {status} · risk {risk}")
        if doc.summary:
            lines.append(f"  {doc.summary}")
    return "\n".join(lines)


def format_analysis(name: str, risk_level: str | None, analysis: Analysis) -> str:
    parts = [f"## {name}", f"Overall risk: {_RISK_BADGES.get(risk_level or '', '-')}", "", analysis.summary]
    if analysis.key_findings:
        parts += ["", "### Key findings"] + [f"- {finding}" for finding in analysis.key_findings]
    if analysis.risks:
        parts += ["", "### Risks"]
        for risk in analysis.risks:
            parts.append(f"- **{risk.type}** ({risk.severity}): {risk.description} _{risk.recommendation}_")
    if analysis.obligations:
        parts += ["", "### Obligations"]
        for item in analysis.obligations:
            deadline = f" by {item.deadline}" if item.deadline else ""
            parts.append(f"- {item.party}: {item.description}{deadline} [{item.status}]")
    if analysis.important_dates:
        parts += ["", "### Important dates"]
        parts += [f"- {d.date}: {d.description} ({d.category})" for d in analysis.important_dates]
    if analysis.key_terms:
        parts += ["", "### Key terms"]
        parts += [f"- **{t.term}** ({t.importance}): {t.definition}" for t in analysis.key_terms]
    if analysis.financial_terms:
        parts += ["", "### Financial terms"]
        for term in analysis.financial_terms:
            due = f", due {term.due_date}" if term.due_date else ""
            parts.append(f"- {term.type}: {term.amount} ({term.frequency}{due})")
    if analysis.parties:
        parts += ["", "### Parties"]
        for party in analysis.parties:
            parts.append(f"- **{party.name}** ({party.role})")
            parts += [f"  - {duty}" for duty in party.responsibilities]
    return "\n".join(parts)


def format_conversation(conversation: Conversation) -> str:
    lines = []
    for message in conversation.messages:
        speaker = "🧑 You" if message.role == "user" else "🤖 Assistant"
        marker = " ⚠️ not delivered" if message.delivery_status == "error" else ""
        lines.append(f"**{speaker}** · {message.timestamp:%H:%M}{marker}\n\n{message.content}")
    return "\n\n---\n\n".join(lines)


def format_notifications(items: Iterable[Notification]) -> str:
    icons = {"success": "✅", "error": "⚠️"}
    return "\n".join(f"{icons[item.level]} {item.message}" for item in items)


def _normalize_path(file: object) -> Path | None:
    if isinstance(file, Path):
        return file
    if isinstance(file, str):
        return Path(file)
    if hasattr(file, "name"):
        return Path(getattr(file, "name"))
    return None


async def _analysis_markdown(shell: ApplicationShell, screen: Screen) -> str:
    document_id = screen.document_id
    if not document_id:
        return "Select a document from the dashboard to view its analysis."
    try:
        analysis = await shell.deps.analysis.load(document_id)
    except AnalysisPending:
        return "⏳ This document is still being analyzed. Check back shortly."
    except AnalysisFailed as exc:
        return f"⚠️ {exc}"
    except NotFound:
        return "Document not found."
    except LegalLensError:
        return "⚠️ Failed to load document analysis."
    summary = shell.deps.registry.describe(document_id)
    return format_analysis(summary.name, summary.risk_level, analysis)


def _chat_markdown(shell: ApplicationShell, screen: Screen) -> tuple[str, str]:
    document_id = screen.document_id
    if not document_id:
        return "### Chat", "Select a document from the dashboard to start a conversation."
    try:
        summary = shell.deps.registry.describe(document_id)
        conversation = shell.deps.registry.get_conversation(document_id)
    except (UnknownDocument, DocumentStateError) as exc:
        return "### Chat", f"⚠️ {exc}"
    risk = _RISK_BADGES.get(summary.risk_level or "", "-")
    return f"### Chat · {summary.name} · risk {risk}", format_conversation(conversation)


async def submit_login(shell: ApplicationShell, email: str, password: str) -> Screen:
    try:
        return await shell.login(email.strip(), password)
    except InvalidCredentials:
        shell.deps.notifications.error("Invalid email or password")
    except LegalLensError:
        shell.deps.notifications.error("Failed to sign in. Please try again.")
    return shell.render()


async def submit_signup(shell: ApplicationShell, email: str, password: str) -> Screen:
    if not email.strip() or not password:
        shell.deps.notifications.error("Email and password are required")
        return shell.render()
    try:
        return await shell.signup(email.strip(), password)
    except LegalLensError:
        shell.deps.notifications.error("Failed to create account. Please try again.")
    return shell.render()


async def render_updates(shell: ApplicationShell, screen: Screen | None = None) -> list[Any]:
    """Return the component updates for the current screen, in ``build_interface`` output order."""

    screen = screen or shell.render()
    registry = shell.deps.registry
    documents = registry.list_documents()
    choices = [(doc.name, doc.id) for doc in documents]
    selected = screen.document_id if any(doc.id == screen.document_id for doc in documents) else None
    user = screen.session
    header = "## LegalLens"
    if user is not None:
        header += f" · {user.display_name or user.email}"
    analysis_md = await _analysis_markdown(shell, screen) if screen.view == "analysis" else ""
    chat_title, chat_md = _chat_markdown(shell, screen) if screen.view == "chat" else ("", "")
    profile_md = ""
    if user is not None:
        stats = registry.stats()
        profile_md = (
            f"**Email:** {user.email}\n\n**Display name:** {user.display_name or '-'}\n\n"
            f"Documents uploaded: {stats.total} · Analyses completed: {stats.completed} · "
            f"Chat sessions: {stats.chat_sessions}"
        )
    updates: list[Any] = [
        gr.update(value=header),
        gr.update(value=format_notifications(shell.deps.notifications.drain())),
        gr.update(visible=screen.show_chrome),
    ]
    updates += [gr.update(visible=screen.view == view) for view in VIEWS]
    updates += [
        gr.update(value=format_stats(registry.stats())),
        gr.update(value=format_documents(documents)),
        gr.update(choices=choices, value=selected),
        gr.update(value=analysis_md),
        gr.update(value=chat_title),
        gr.update(value=chat_md),
        gr.update(value=profile_md),
        gr.update(value=(user.display_name or "") if user else ""),
    ]
    return updates


def build_interface(shell: ApplicationShell | None = None) -> gr.Blocks:
    app_shell = shell or create_shell()

    with gr.Blocks(title="LegalLens") as demo:
        header = gr.Markdown("## LegalLens")
        toast = gr.Markdown("")
        with gr.Row(visible=False) as sidebar:
            nav_buttons = [gr.Button(item.label, size="sm") for item in SIDEBAR]
            theme_btn = gr.Button("Toggle theme", size="sm")
            logout_btn = gr.Button("Log out", size="sm", variant="stop")

        with gr.Column(visible=False) as auth_col:
            gr.Markdown("### Sign in to LegalLens")
            email_box = gr.Textbox(label="Email")
            password_box = gr.Textbox(label="Password", type="password")
            with gr.Row():
                login_btn = gr.Button("Log in", variant="primary")
                signup_btn = gr.Button("Sign up")

        with gr.Column(visible=False) as dashboard_col:
            stats_md = gr.Markdown("")
            documents_md = gr.Markdown("")
            document_select = gr.Dropdown(label="Document", choices=[], interactive=True)
            with gr.Row():
                refresh_btn = gr.Button("Refresh history")
                open_analysis_btn = gr.Button("View analysis", variant="primary")
                open_chat_btn = gr.Button("Chat")

        with gr.Column(visible=False) as upload_col:
            gr.Markdown("### Upload a legal document (PDF or image, up to 10MB)")
            file_input = gr.File(label="Document", file_types=[".pdf", ".png", ".jpg", ".jpeg"], type="filepath")
            upload_btn = gr.Button("Upload & analyze", variant="primary")
            upload_status = gr.Markdown("")

        with gr.Column(visible=False) as analysis_col:
            analysis_md = gr.Markdown("")
            with gr.Row():
                analysis_chat_btn = gr.Button("Ask questions about this document")
                analysis_back_btn = gr.Button("Back to Dashboard")

        with gr.Column(visible=False) as chat_col:
            chat_title = gr.Markdown("")
            chat_md = gr.Markdown("")
            message_box = gr.Textbox(label="Message", placeholder="Ask a question about this document...")
            with gr.Row():
                send_btn = gr.Button("Send", variant="primary")
                chat_back_btn = gr.Button("Back to Dashboard")

        with gr.Column(visible=False) as profile_col:
            profile_md = gr.Markdown("")
            name_box = gr.Textbox(label="Display name")
            save_btn = gr.Button("Save profile", variant="primary")

        view_columns = {
            "auth": auth_col,
            "dashboard": dashboard_col,
            "upload": upload_col,
            "analysis": analysis_col,
            "chat": chat_col,
            "profile": profile_col,
        }
        outputs = [header, toast, sidebar]
        outputs += [view_columns[view] for view in VIEWS]
        outputs += [stats_md, documents_md, document_select, analysis_md, chat_title, chat_md, profile_md, name_box]

        async def _refresh():
            return await render_updates(app_shell)

        def _navigate_to(view: str):
            async def handler():
                return await render_updates(app_shell, app_shell.navigate(view))

            return handler

        async def _open_analysis(document_id: str | None):
            return await render_updates(app_shell, app_shell.navigate("analysis", document_id or None))

        async def _open_chat(document_id: str | None):
            return await render_updates(app_shell, app_shell.navigate("chat", document_id or None))

        async def _chat_about_current():
            return await _open_chat(app_shell.render().document_id)

        async def _save_profile(name: str):
            try:
                screen = await app_shell.update_profile(name)
            except LegalLensError:
                screen = app_shell.render()
            return await render_updates(app_shell, screen)

        async def _login(email: str, password: str):
            return await render_updates(app_shell, await submit_login(app_shell, email, password))

        async def _signup(email: str, password: str):
            return await render_updates(app_shell, await submit_signup(app_shell, email, password))

        async def _logout():
            return await render_updates(app_shell, await app_shell.logout())

        async def _toggle_theme():
            return await render_updates(app_shell, app_shell.toggle_theme())

        async def _refresh_history():
            await app_shell.deps.history.refresh()
            return await render_updates(app_shell)

        async def _upload(file: object):
            path = _normalize_path(file)
            if path is None:
                app_shell.deps.notifications.error("Please select at least one file to upload")
                return ["", *await render_updates(app_shell)]
            try:
                document = await app_shell.deps.upload.upload(UploadFile.from_path(path))
            except UploadRejected:
                return ["", *await render_updates(app_shell)]
            status = _STATUS_BADGES.get(document.status, document.status)
            return [f"**{document.name}**: {status}", *await render_updates(app_shell)]

        async def _send(document_select_value: str | None, text: str):
            screen = app_shell.render()
            document_id = screen.document_id or document_select_value
            if document_id:
                try:
                    await app_shell.deps.chat.send(document_id, text)
                except LegalLensError as exc:
                    app_shell.deps.notifications.error(str(exc))
            return ["", *await render_updates(app_shell)]

        demo.load(_refresh, outputs=outputs)
        for button, item in zip(nav_buttons, SIDEBAR):
            button.click(_navigate_to(item.view), outputs=outputs)
        theme_btn.click(_toggle_theme, outputs=outputs)
        logout_btn.click(_logout, outputs=outputs)
        login_btn.click(_login, inputs=[email_box, password_box], outputs=outputs)
        signup_btn.click(_signup, inputs=[email_box, password_box], outputs=outputs)
        refresh_btn.click(_refresh_history, outputs=outputs)
        open_analysis_btn.click(_open_analysis, inputs=[document_select], outputs=outputs)
        open_chat_btn.click(_open_chat, inputs=[document_select], outputs=outputs)
        analysis_chat_btn.click(_chat_about_current, outputs=outputs)
        analysis_back_btn.click(_navigate_to("dashboard"), outputs=outputs)
        chat_back_btn.click(_navigate_to("dashboard"), outputs=outputs)
        upload_btn.click(_upload, inputs=[file_input], outputs=[upload_status, *outputs])
        send_btn.click(_send, inputs=[document_select, message_box], outputs=[message_box, *outputs])
        save_btn.click(_save_profile, inputs=[name_box], outputs=outputs)

    return demo


def launch(*, share: bool = False) -> None:
    """Launch the Gradio interface."""

    demo = build_interface()
    demo.launch(share=share)


if __name__ == "__main__":
    launch()
