"""Conversation state machine for the print flow."""

import re
from dataclasses import dataclass

from print_bot.domain.errors import (
    InternalError,
    PrintBotError,
    UnsupportedInputError,
    ValidationError,
)
from print_bot.domain.messages import Attachment, InputKind, NormalizedInput
from print_bot.domain.printing import PrintJob
from print_bot.domain.sessions import ColorMode, Session, SessionStatus

GREETINGS = frozenset({"oi", "olá", "iniciar"})

WELCOME_TEXT = (
    "Olá! Bem-vindo(a) ao nosso serviço de impressão automática. "
    "Por favor, envie o documento que você deseja imprimir (PDF, DOCX, JPG, PNG)."
)
INVALID_FILE_TEXT = "Por favor, envie um arquivo válido (PDF, DOCX, JPG ou PNG)."
NOT_TEXT_OPTION_TEXT = (
    "Opção inválida. Por favor, responda com o número da opção desejada."
)
INVALID_OPTION_TEXT = (
    "Opção inválida. Por favor, digite 1 para Preto e Branco ou 2 para Colorida."
)
NOT_TEXT_COPIES_TEXT = (
    "Por favor, digite um número válido para a quantidade de cópias."
)
INVALID_COPIES_TEXT = "Por favor, digite um número válido e positivo."
PRINT_SUCCESS_TEXT = (
    "Pronto! Seu documento foi enviado para a impressora. "
    "Você pode retirá-lo no balcão."
)
PRINT_FAILURE_TEXT = (
    "Ocorreu um erro ao enviar seu documento para a impressora. "
    "Verifique se o bot está configurado corretamente "
    "ou fale com um de nossos atendentes."
)
STORAGE_FAILURE_TEXT = (
    "Não foi possível salvar o seu arquivo. "
    'Por favor, digite "olá" para recomeçar.'
)
RECOVERY_TEXT = (
    'Ocorreu um erro inesperado. Por favor, digite "olá" para recomeçar.'
)

_COLOR_OPTIONS = {"1": ColorMode.MONO, "2": ColorMode.COLOR}
_COLOR_ADJECTIVES = {ColorMode.MONO: "preto e branco", ColorMode.COLOR: "colorido"}
_COPIES_PATTERN = re.compile(r"[+-]?\d+", flags=re.ASCII)


@dataclass(frozen=True)
class StoreFile:
    """Persist the attachment and record its path on the next session."""

    attachment: Attachment
    file_name: str


@dataclass(frozen=True)
class SubmitPrint:
    """Submit the job, then release its file."""

    job: PrintJob


@dataclass(frozen=True)
class ReleaseFile:
    """Delete a file left behind by an abandoned flow."""

    file_path: str


Directive = StoreFile | SubmitPrint | ReleaseFile


@dataclass(frozen=True)
class Decision:
    """Outcome of feeding one input to the state machine.

    ``session`` is ``None`` when the flow reached its terminal transition and
    the record must be removed from the store.
    """

    session: Session | None
    reply: str
    directive: Directive | None = None
    error: PrintBotError | None = None


def decide(session: Session, message: NormalizedInput) -> Decision:
    """Return the next session, reply and side effect for an input."""
    if session.status is SessionStatus.AWAITING_WELCOME or _is_greeting(message):
        return _restart(session)
    if session.status is SessionStatus.AWAITING_FILE:
        return _on_file(session, message)
    if session.status is SessionStatus.AWAITING_COLOR_CHOICE:
        return _on_color_choice(session, message)
    if session.status is SessionStatus.AWAITING_COPIES:
        return _on_copies(session, message)
    raise InternalError(f"Unknown session status: {session.status}")


def print_result_reply(succeeded: bool) -> str:
    """Return the text sent once the printer answered."""
    return PRINT_SUCCESS_TEXT if succeeded else PRINT_FAILURE_TEXT


def storage_failure_reply() -> str:
    return STORAGE_FAILURE_TEXT


def recovery_reply() -> str:
    return RECOVERY_TEXT


def synthesize_file_name(attachment: Attachment, message_id: str) -> str:
    """Return the attachment's own name or one derived from the message."""
    if attachment.suggested_name and attachment.suggested_name.strip():
        return attachment.suggested_name.strip()
    subtype = attachment.mime_type.split("/")[-1].split(";")[0].strip()
    return f"{message_id}.{subtype or 'bin'}"


def _is_greeting(message: NormalizedInput) -> bool:
    return message.is_text and message.text in GREETINGS


def _restart(session: Session) -> Decision:
    # A restart discards progress but must not orphan an uploaded file.
    directive = ReleaseFile(session.file_path) if session.file_path else None
    return Decision(
        session=Session(
            conversation_id=session.conversation_id,
            status=SessionStatus.AWAITING_FILE,
        ),
        reply=WELCOME_TEXT,
        directive=directive,
    )


def _on_file(session: Session, message: NormalizedInput) -> Decision:
    if message.kind is not InputKind.ATTACHMENT or message.attachment is None:
        return Decision(
            session=session,
            reply=INVALID_FILE_TEXT,
            error=UnsupportedInputError("Expected a document or image"),
        )
    file_name = synthesize_file_name(message.attachment, message.message_id)
    return Decision(
        session=session.advance(
            SessionStatus.AWAITING_COLOR_CHOICE, file_name=file_name
        ),
        reply=_menu_text(file_name),
        directive=StoreFile(attachment=message.attachment, file_name=file_name),
    )


def _on_color_choice(session: Session, message: NormalizedInput) -> Decision:
    if not message.is_text:
        return Decision(
            session=session,
            reply=NOT_TEXT_OPTION_TEXT,
            error=UnsupportedInputError("Expected a menu option"),
        )
    color_mode = _COLOR_OPTIONS.get(message.text)
    if color_mode is None:
        return Decision(
            session=session,
            reply=INVALID_OPTION_TEXT,
            error=ValidationError(f"Unknown color option: {message.text!r}"),
        )
    return Decision(
        session=session.advance(SessionStatus.AWAITING_COPIES, color_mode=color_mode),
        reply=f"Ok, impressão {color_mode.label}.\n\nE quantas cópias você deseja?",
    )


def _on_copies(session: Session, message: NormalizedInput) -> Decision:
    if not session.file_path or session.color_mode is None:
        raise InternalError(
            f"Session {session.conversation_id} is missing its file or color mode"
        )
    if not message.is_text:
        return Decision(
            session=session,
            reply=NOT_TEXT_COPIES_TEXT,
            error=UnsupportedInputError("Expected a number of copies"),
        )
    copies = parse_copies(message.text)
    if copies is None:
        return Decision(
            session=session,
            reply=INVALID_COPIES_TEXT,
            error=ValidationError(f"Invalid number of copies: {message.text!r}"),
        )
    color_text = _COLOR_ADJECTIVES[session.color_mode]
    return Decision(
        session=None,
        reply=(
            f'Ok, imprimindo {copies} cópia(s) de "{session.file_name}" '
            f"em modo {color_text}. Aguarde..."
        ),
        directive=SubmitPrint(
            PrintJob(
                file_path=session.file_path,
                copies=copies,
                color_mode=session.color_mode,
            )
        ),
    )


def parse_copies(text: str) -> int | None:
    """Parse a positive number of copies from user input."""
    cleaned = text.strip()
    if not _COPIES_PATTERN.fullmatch(cleaned):
        return None
    value = int(cleaned)
    return value if value > 0 else None


def _menu_text(file_name: str) -> str:
    return (
        f'Arquivo "{file_name}" recebido!\n\n'
        "Como será a impressão?\n"
        "Digite o número da opção desejada:\n"
        "1. Preto e Branco\n"
        "2. Colorida"
    )
