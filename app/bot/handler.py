import asyncio

from loguru import logger
from telegram import Update
from telegram.ext import (
    Application,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from app.config import get_settings
from app.deps import build_assistant, build_dispatcher, get_store
from app.models.schemas import Task, TransactionSummary
from app.services.chat import run_chat_turn

settings = get_settings()

BUSY_REPLY = "Um momento, Senhor. Ainda estou cuidando da sua instrução anterior."


def _format_brl(amount: float) -> str:
    """Format amount in BRL style: R$ 1.234,50."""
    text = f"{amount:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"R$ {text}"


def _tasks_summary(tasks: list[Task]) -> str:
    """Build a summary of pending tasks ordered by date."""
    if not tasks:
        return "Nenhuma tarefa pendente, Senhor. Agenda livre."

    lines = ["*Tarefas pendentes:*\n"]
    for i, task in enumerate(tasks, 1):
        line = f"{i}. *{task.title}* — {task.date.strftime('%d/%m/%Y')}"
        if task.time:
            line += f" às {task.time}"
        if task.priority == "high":
            line += " (urgente)"
        if task.recurrence.period != "NONE":
            line += " (recorrente)"
        lines.append(line)
    return "\n".join(lines)


def _finance_summary(summary: TransactionSummary) -> str:
    return "\n".join(
        [
            "*Resumo financeiro:*\n",
            f"Receitas: {_format_brl(summary.income)}",
            f"Despesas: {_format_brl(summary.expense)}",
            f"Investimentos: {_format_brl(summary.investment)}",
            f"*Saldo: {_format_brl(summary.balance)}*",
        ]
    )


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /start command."""
    await update.message.reply_text(
        "Olá, Senhor. Sou o Alfred, seu mordomo financeiro.\n\n"
        "Envie uma mensagem para registrar despesas, agendar compromissos "
        "ou incluir itens nas suas listas.\n\n"
        "Exemplos:\n"
        '• "Gastei 50 reais no ifood hoje"\n'
        '• "Reunião com o contador amanhã às 10h"\n'
        '• "Coloca leite na lista do mercado"\n'
        '• "Quero juntar 10 mil para uma viagem até dezembro"\n\n'
        "Comandos:\n"
        "/tarefas — Tarefas pendentes\n"
        "/resumo — Resumo financeiro\n"
        "/help — Esta mensagem"
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /help command."""
    await start_command(update, context)


async def tasks_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /tarefas command."""
    tasks = get_store().tasks.get_all(status="PENDING")
    await update.message.reply_text(_tasks_summary(tasks), parse_mode="Markdown")


async def summary_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /resumo command."""
    summary = get_store().transactions.summary()
    await update.message.reply_text(_finance_summary(summary), parse_mode="Markdown")


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle incoming text messages: the main conversation entry point."""
    await _process_text(update, context, update.message.text.strip())


async def _process_text(update: Update, context: ContextTypes.DEFAULT_TYPE, user_text: str):
    logger.info("Telegram message: {}", user_text)

    # One chat turn at a time per chat
    if context.chat_data.get("busy"):
        await update.message.reply_text(BUSY_REPLY)
        return

    context.chat_data["busy"] = True
    try:
        await update.message.chat.send_action("typing")

        store = get_store()
        turn = await asyncio.to_thread(
            run_chat_turn,
            user_text,
            store,
            build_assistant(store),
            build_dispatcher(store),
            conversation=f"telegram:{update.message.chat_id}",
            task_limit=settings.recent_tasks_limit,
        )
    finally:
        context.chat_data["busy"] = False

    await update.message.reply_text(turn.reply)
    if turn.follow_up:
        await update.message.reply_text(turn.follow_up)


async def handle_voice(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle voice notes. Only captioned ones can be processed."""
    if update.message.caption:
        await _process_text(update, context, update.message.caption.strip())
        return

    await update.message.reply_text(
        "Recebi seu áudio, Senhor, mas ainda não consigo transcrevê-lo.\n"
        "Poderia digitar a instrução?"
    )


def build_bot_app() -> Application:
    """Build and return the Telegram bot application."""
    app = Application.builder().token(settings.telegram_bot_token).build()

    # Command handlers
    app.add_handler(CommandHandler("start", start_command))
    app.add_handler(CommandHandler("help", help_command))
    app.add_handler(CommandHandler("tarefas", tasks_command))
    app.add_handler(CommandHandler("resumo", summary_command))

    # Message handlers
    app.add_handler(MessageHandler(filters.VOICE, handle_voice))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handle_message))

    return app
