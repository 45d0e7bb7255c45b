"""CLI entry point."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import mimetypes
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from . import analytics, market
from .camera import ProductCamera
from .config import MercadoConfig, load_config
from .db import SessionStore
from .errors import ClassificationError, MercadoError
from .flow import ask_assistant, save_current_list, scan_product
from .models import Session
from .shopping_list import ChatTranscript, ShoppingList, format_money, whatsapp_url

_ANALYSIS_MARKS = {"cheap": "↓", "fair": "=", "expensive": "↑"}


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="mercado",
        description="Suas Compras de Mercado: escaneie produtos, salve listas e acompanhe seus gastos",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="caminho do arquivo de configuração (TOML)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="exibir logs detalhados"
    )

    sub = parser.add_subparsers(dest="command")

    # cameras
    sub.add_parser("cameras", help="listar câmeras disponíveis")

    # scan
    scan_parser = sub.add_parser("scan", help="fotografar e identificar produtos")
    scan_parser.add_argument(
        "--image", type=str, nargs="+", help="usar arquivos de imagem existentes"
    )
    scan_parser.add_argument("--json", action="store_true", help="saída em JSON")
    scan_parser.add_argument(
        "--save", action="store_true", help="salvar a lista ao final"
    )

    # history
    history_parser = sub.add_parser("history", help="listar compras salvas")
    history_parser.add_argument("--json", action="store_true", help="saída em JSON")

    # show
    show_parser = sub.add_parser("show", help="mostrar uma compra salva")
    show_parser.add_argument("id", help="id da lista")
    show_parser.add_argument("--json", action="store_true", help="saída em JSON")

    # delete
    delete_parser = sub.add_parser("delete", help="excluir uma compra salva")
    delete_parser.add_argument("id", help="id da lista")

    # stats
    stats_parser = sub.add_parser("stats", help="resumo financeiro")
    stats_parser.add_argument("--json", action="store_true", help="saída em JSON")

    # chat
    chat_parser = sub.add_parser("chat", help="perguntar à assistente")
    chat_parser.add_argument("prompt", nargs="*", help="pergunta")
    chat_parser.add_argument(
        "--list", type=str, default=None, dest="list_id",
        help="usar uma compra salva como contexto",
    )

    # market
    market_parser = sub.add_parser("market", help="catálogo de exemplo")
    market_parser.add_argument("--search", type=str, default="", help="filtrar")

    # share
    share_parser = sub.add_parser("share", help="texto para compartilhar uma compra")
    share_parser.add_argument("id", help="id da lista")
    share_parser.add_argument(
        "--url", action="store_true", help="gerar link do WhatsApp"
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    load_dotenv()
    _setup_logging(args.verbose)
    config = load_config(args.config)

    try:
        match args.command:
            case "cameras":
                _cmd_cameras()
            case "scan":
                asyncio.run(_cmd_scan(config, args))
            case "history":
                _cmd_history(config, args)
            case "show":
                _cmd_show(config, args)
            case "delete":
                _cmd_delete(config, args)
            case "stats":
                _cmd_stats(config, args)
            case "chat":
                asyncio.run(_cmd_chat(config, args))
            case "market":
                _cmd_market(config, args)
            case "share":
                _cmd_share(config, args)
    except (MercadoError, ImportError, OSError, RuntimeError, ValueError) as e:
        print(f"Erro: {e}", file=sys.stderr)
        sys.exit(1)


def _setup_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else os.environ.get("LOG_LEVEL", "WARNING")
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.WARNING),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _open_store(config: MercadoConfig) -> SessionStore:
    return SessionStore(db_path=config.database.path)


def _cmd_cameras() -> None:
    cameras = ProductCamera.list_cameras()
    if not cameras:
        print("Nenhuma câmera encontrada.")
        return
    print(f"Câmeras disponíveis: {len(cameras)}")
    for idx in cameras:
        print(f"  câmera {idx}")


def _load_images(args) -> list[tuple[bytes, str]]:
    images: list[tuple[bytes, str]] = []
    for path in args.image:
        data = Path(path).read_bytes()
        media_type = mimetypes.guess_type(path)[0] or "image/jpeg"
        images.append((data, media_type))
    return images


async def _cmd_scan(config: MercadoConfig, args) -> None:
    from .vision import create_backend

    if args.image:
        images = _load_images(args)
    else:
        camera = ProductCamera(
            camera_index=config.camera.index,
            save_dir=config.camera.save_dir,
        )
        print("📷 Fotografando...")
        capture = camera.capture()
        images = [(capture.data, "image/jpeg")]

    backend = create_backend(config)
    shopping_list = ShoppingList()
    currency = config.app.currency

    print("🔍 Analisando produtos...", file=sys.stderr if args.json else sys.stdout)
    failures = 0
    for data, media_type in images:
        try:
            await scan_product(backend, data, shopping_list, mime_type=media_type)
        except ClassificationError as e:
            failures += 1
            print(
                f"Não foi possível identificar o produto: {e}", file=sys.stderr
            )

    if args.json:
        print(
            json.dumps(
                {
                    "items": [i.to_dict() for i in shopping_list.items],
                    "total": shopping_list.total,
                },
                ensure_ascii=False,
                indent=2,
            )
        )
    else:
        if not shopping_list:
            print("Nenhum produto identificado.")
        else:
            print(f"\n🛒 Lista atual ({len(shopping_list)} itens):")
            for item in shopping_list.items:
                mark = _ANALYSIS_MARKS[item.analysis.value]
                print(
                    f"  {item.name:<30} {format_money(item.price, currency):>12}"
                    f"  {mark} {item.analysis.label}  [{item.category}]"
                )
            print(f"\n💰 Total: {format_money(shopping_list.total, currency)}")

    if failures and not shopping_list:
        sys.exit(1)

    if args.save and shopping_list:
        store = _open_store(config)
        try:
            session = save_current_list(store, shopping_list)
        finally:
            store.close()
        print(f"✅ Lista salva: {session.name} (id {session.id})", file=sys.stderr)


def _cmd_history(config: MercadoConfig, args) -> None:
    store = _open_store(config)
    try:
        sessions = store.list_sessions()
    finally:
        store.close()

    if args.json:
        print(
            json.dumps(
                [s.to_dict() for s in sessions], ensure_ascii=False, indent=2
            )
        )
        return
    if not sessions:
        print("Nenhuma compra salva.")
        return
    currency = config.app.currency
    for s in sessions:
        print(
            f"  {s.id}  {s.display_date}  {s.name:<20} "
            f"{len(s.items):>3} itens  {format_money(s.total, currency):>12}"
        )


def _get_session_or_exit(config: MercadoConfig, session_id: str) -> Session:
    store = _open_store(config)
    try:
        session = store.get_session(session_id)
    finally:
        store.close()
    if session is None:
        print(f"Lista não encontrada: {session_id}", file=sys.stderr)
        sys.exit(1)
    return session


def _cmd_show(config: MercadoConfig, args) -> None:
    session = _get_session_or_exit(config, args.id)
    if args.json:
        print(json.dumps(session.to_dict(), ensure_ascii=False, indent=2))
        return
    currency = config.app.currency
    print(f"{session.name} ({session.display_date})")
    for item in session.items:
        print(
            f"  {item.name:<30} {format_money(item.price, currency):>12}"
            f"  {item.analysis.label}  [{item.category}]"
        )
    print(f"Total: {format_money(session.total, currency)}")


def _cmd_delete(config: MercadoConfig, args) -> None:
    store = _open_store(config)
    try:
        store.delete_session(args.id)
    finally:
        store.close()
    print(f"Lista excluída: {args.id}")


def _cmd_stats(config: MercadoConfig, args) -> None:
    store = _open_store(config)
    try:
        sessions = store.list_sessions()
    finally:
        store.close()
    summary = analytics.summarize(sessions)

    if args.json:
        delta = summary.delta
        data = {
            "total_spent": summary.total_spent,
            "average_per_session": summary.average_per_session,
            "session_count": summary.session_count,
            "last_total": summary.last_total,
            "delta": None
            if delta is None
            else {
                "latest_id": delta.latest.id,
                "previous_id": delta.previous.id,
                "delta": delta.delta,
                "percent_change": delta.percent_change,
            },
            "trend": [
                {"date": p.full_date, "label": p.label, "total": p.total}
                for p in summary.trend
            ],
            "categories": [
                {
                    "category": c.category,
                    "total": c.total,
                    "percentage": c.percentage,
                    "item_count": c.item_count,
                }
                for c in summary.categories
            ],
        }
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return

    print(render_summary(summary, config.app.currency))


def render_summary(summary: analytics.SpendingSummary, currency: str = "R$") -> str:
    """Text rendering of the finances view with bar charts."""
    lines = [f"Gasto total acumulado: {format_money(summary.total_spent, currency)}"]
    if summary.average_per_session is None:
        lines.append("Nenhuma compra salva ainda.")
        return "\n".join(lines)

    lines.append(
        f"Média por compra: {format_money(summary.average_per_session, currency)}"
    )
    last = f"Última compra: {format_money(summary.last_total or 0.0, currency)}"
    delta = summary.delta
    if delta is not None:
        arrow = "↑" if delta.is_up else "↓"
        if delta.percent_change is not None:
            last += f"  {arrow} {abs(delta.percent_change):.0f}%"
        else:
            last += f"  {arrow} {format_money(abs(delta.delta), currency)}"
    lines.append(last)

    lines += ["", "Evolução de gastos:"]
    peak = max((p.total for p in summary.trend), default=0.0)
    for p in summary.trend:
        bar = "█" * (int(p.total / peak * 20) if peak > 0 else 0)
        lines.append(f"  {p.label}  {bar} {format_money(p.total, currency)}")

    lines += ["", "Resumo por categoria:"]
    for c in summary.categories:
        pct = f"{c.percentage:.0f}%" if c.percentage is not None else "—"
        bar = "█" * int((c.percentage or 0) / 5)
        lines.append(
            f"  {c.category:<20} {pct:>4} {bar} {format_money(c.total, currency)}"
        )
    return "\n".join(lines)


async def _cmd_chat(config: MercadoConfig, args) -> None:
    from .assistant import SUGGESTED_PROMPTS, create_assistant

    prompt = " ".join(args.prompt).strip()
    if not prompt:
        print("Sugestões:")
        for s in SUGGESTED_PROMPTS:
            print(f"  • {s}")
        return

    shopping_list = ShoppingList()
    if args.list_id:
        shopping_list = ShoppingList.from_session(
            _get_session_or_exit(config, args.list_id)
        )

    backend = create_assistant(config)
    reply = await ask_assistant(
        backend,
        ChatTranscript(),
        prompt,
        shopping_list,
        currency=config.app.currency,
    )
    print(reply)


def _cmd_market(config: MercadoConfig, args) -> None:
    products = market.search(args.search)
    if not products:
        print("Nenhum produto encontrado.")
        return
    for p in products:
        print(
            f"  {p.name:<25} {format_money(p.price, config.app.currency):>10}  {p.store}"
        )


def _cmd_share(config: MercadoConfig, args) -> None:
    session = _get_session_or_exit(config, args.id)
    text = ShoppingList.from_session(session).share_text(config.app.currency)
    print(whatsapp_url(text) if args.url else text)
