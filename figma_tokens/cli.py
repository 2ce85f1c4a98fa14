#!/usr/bin/env python3
"""
figma-tokens CLI — Figma design token 同步

  figma-tokens sync --file-key KEY --output-path tokens.css --format css
  figma-tokens validate --file-key KEY [--detailed]
  figma-tokens generate-types --file-key KEY --output-path tokens.ts [--namespace NS]
  figma-tokens watch --file-key KEY --output-path tokens.json
  figma-tokens projects --team-id TEAM
  figma-tokens images --file-key KEY --ids 1:2,1:3
  figma-tokens comments --file-key KEY
"""

import argparse
import logging
import sys
import time
from typing import List, Optional

from . import __version__
from .config import (
    DEFAULT_CONFIG_PATH,
    SyncConfig,
    load_config,
    load_env,
    load_sync_config,
    require_token,
)
from .errors import ConfigurationError, FetchError, TokenNameCollisionError
from .figma_reader import IMAGE_FORMATS, FigmaAPIClient
from .generator import FORMATS, check_extension, render, to_typed_namespace, write_output
from .service import TokenService, analyze_file, validate_design_file
from .tokens import DesignTokenGroup, count_tokens


def _make_client(sync_config: SyncConfig) -> FigmaAPIClient:
    return FigmaAPIClient(require_token(sync_config))


def _print_group_counts(groups: List[DesignTokenGroup], indent: str = "  ") -> None:
    for group in groups:
        print(f"{indent}{group.name}: {len(group.tokens)} tokens")


def _resolve_file_key(args, sync_config: SyncConfig) -> Optional[str]:
    # config 的 figma.fileKey 已合併進 design_system_file_key；空白 key 視同未設定
    key = getattr(args, "file_key", None) or sync_config.design_system_file_key
    key = (key or "").strip()
    return key or None


def _client_or_exit(sync_config: SyncConfig) -> Optional[FigmaAPIClient]:
    try:
        return _make_client(sync_config)
    except ConfigurationError as e:
        print(f"❌ {e}")
        return None


def run_sync(
    service: TokenService,
    file_key: str,
    output_path: str,
    fmt: str = "json",
    validate: bool = False,
    dry_run: bool = False,
    strict: bool = False,
) -> int:
    """fetch →（validate）→ extract → render → write；回傳 exit code."""
    if fmt not in FORMATS:
        print(f"❌ Unsupported format: {fmt}（可用：{', '.join(FORMATS)}）")
        return 1

    if validate:
        print("   🔍 Validating Figma file...")
        result = service.validate_file(file_key)
        if not result.valid:
            print("❌ File validation failed:")
            for issue in result.issues:
                print(f"   ⚠️  {issue}")
            return 1
        print("   ✅ File validation passed")

    print("   Extracting design tokens...")
    try:
        groups = service.extract_design_tokens(file_key, strict=strict)
    except (FetchError, TokenNameCollisionError, ValueError) as e:
        print(f"❌ Failed to sync design tokens: {e}")
        return 1

    if not groups:
        print("   ⚠️  No design tokens found in the file")
        return 0

    total = count_tokens(groups)
    print(f"   ✅ Extracted {total} design tokens")

    if dry_run:
        print(f"\n📋 Dry run - tokens would be written to: {output_path}")
        print("\n📊 Token Summary:")
        _print_group_counts(groups)
        return 0

    output = render(groups, fmt)
    try:
        path = write_output(output, output_path)
    except OSError as e:
        print(f"❌ Failed to write {output_path}: {e}")
        return 1
    print(f"   ✅ Design tokens written to: {path}")

    print("\n📊 Sync Summary:")
    print(f"  📁 File: {file_key}")
    print(f"  📝 Format: {fmt.upper()}")
    print(f"  📊 Total Groups: {len(groups)}")
    print(f"  🎨 Total Tokens: {total}")
    _print_group_counts(groups, indent="    ")
    return 0


def _sync_params(args, config: dict, sync_config: SyncConfig):
    sync_cfg = config.get("sync", {})
    if not isinstance(sync_cfg, dict):
        sync_cfg = {}
    file_key = _resolve_file_key(args, sync_config)
    output_path = args.output_path or sync_cfg.get("outputPath")
    fmt = args.format or sync_cfg.get("format") or "json"
    return file_key, output_path, fmt


def cmd_sync(args, config: dict, sync_config: SyncConfig) -> int:
    """Sync: Figma 檔案 → design tokens 檔案."""
    file_key, output_path, fmt = _sync_params(args, config, sync_config)
    if not file_key:
        print("❌ 請使用 --file-key 或在 config 的 figma.fileKey 設定 Figma 檔案 key。")
        return 1
    if not output_path:
        print("❌ 請使用 --output-path 或在 config 的 sync.outputPath 設定輸出路徑。")
        return 1
    if fmt not in FORMATS:
        print(f"❌ Unsupported format: {fmt}（可用：{', '.join(FORMATS)}）")
        return 1
    expected = check_extension(output_path, fmt)
    if expected:
        print(f"   ⚠️  {output_path} 的副檔名與格式 {fmt} 不符（預期 {expected}）")

    client = _client_or_exit(sync_config)
    if client is None:
        return 1

    print(f"🎨 Syncing design tokens from Figma: {file_key}")
    return run_sync(
        TokenService(client),
        file_key,
        output_path,
        fmt=fmt,
        validate=args.validate,
        dry_run=args.dry_run,
        strict=args.strict,
    )


def cmd_watch(args, config: dict, sync_config: SyncConfig) -> int:
    """Watch: 每隔 interval 重新同步一次，直到 Ctrl+C."""
    file_key, output_path, fmt = _sync_params(args, config, sync_config)
    if not file_key or not output_path:
        print("❌ watch 需要 --file-key 與 --output-path（或 config 對應欄位）。")
        return 1
    if fmt not in FORMATS:
        print(f"❌ Unsupported format: {fmt}（可用：{', '.join(FORMATS)}）")
        return 1

    client = _client_or_exit(sync_config)
    if client is None:
        return 1
    service = TokenService(client)

    interval_ms = args.interval if args.interval is not None else sync_config.sync_interval_ms
    if interval_ms <= 0:
        print(f"❌ interval 必須為正數，目前是 {interval_ms}")
        return 1

    print(f"👀 Watching {file_key} (sync every {interval_ms}ms)...")
    print("   Press Ctrl+C to stop.")
    try:
        while True:
            code = run_sync(service, file_key, output_path, fmt=fmt, strict=args.strict)
            if code != 0:
                print("   ⚠️  Sync cycle failed, retrying at next interval.")
            else:
                print(f"   🕒 Last sync: {time.strftime('%Y-%m-%d %H:%M:%S')}")
            time.sleep(interval_ms / 1000)
    except KeyboardInterrupt:
        print("\n👋 Stopping auto-sync...")
    return 0


def _print_counts(title: str, counts: dict) -> None:
    print(f"  {title}:")
    for key, count in counts.items():
        print(f"    {key}: {count}")


def cmd_validate(args, config: dict, sync_config: SyncConfig) -> int:
    """Validate: 檢查 Figma 檔案結構，--detailed 時印出統計."""
    file_key = _resolve_file_key(args, sync_config)
    if not file_key:
        print("❌ 請使用 --file-key 或在 config 的 figma.fileKey 設定 Figma 檔案 key。")
        return 1
    client = _client_or_exit(sync_config)
    if client is None:
        return 1

    try:
        design_file = TokenService(client).fetch_file(file_key)
    except (FetchError, ValueError) as e:
        print(f"❌ Failed to validate Figma file: {e}")
        return 1
    print(f"✅ File loaded: {design_file.name}")

    result = validate_design_file(design_file)
    print("\n📋 Basic Validation Results:")
    if result.valid:
        print("✅ File structure is valid")
    else:
        print("❌ File structure has issues:")
        for issue in result.issues:
            print(f"  ⚠️  {issue}")

    if args.detailed:
        analysis = analyze_file(design_file)
        print("\n🔍 Detailed Analysis:")
        print("\n📁 File Information:")
        print(f"  Name: {analysis.name}")
        print(f"  Version: {analysis.version}")
        print(f"  Schema Version: {analysis.schema_version}")
        print(f"  Last Modified: {analysis.last_modified}")
        print("\n🧩 Components Analysis:")
        print(f"  Total Components: {sum(analysis.component_types.values())}")
        if analysis.component_types:
            _print_counts("Component Types", analysis.component_types)
        print("\n🎨 Styles Analysis:")
        print(f"  Total Styles: {sum(analysis.style_types.values())}")
        if analysis.style_types:
            _print_counts("Style Types", analysis.style_types)
        print("\n🏗️  Structure Analysis:")
        print(f"  Total Nodes: {analysis.node_count}")
        _print_counts("Node Types", analysis.node_types)
        print("\n🔍 Design System Patterns:")
        print(f"  Color Styles: {'✅' if analysis.has_color_styles else '❌'}")
        print(f"  Text Styles: {'✅' if analysis.has_text_styles else '❌'}")
        print(f"  Component Variants: {'✅' if analysis.has_component_variants else '❌'}")

    print("\n📊 Validation Summary:")
    print(f"  File: {design_file.name}")
    print(f"  Status: {'VALID' if result.valid else 'INVALID'}")
    print(f"  Components: {len(design_file.components)}")
    print(f"  Styles: {len(design_file.styles)}")
    if result.issues:
        print(f"  Issues: {len(result.issues)}")
    return 0 if result.valid else 1


def cmd_generate_types(args, config: dict, sync_config: SyncConfig) -> int:
    """Generate-types: design tokens → TypeScript namespace（interface + as const 值）."""
    file_key = _resolve_file_key(args, sync_config)
    if not file_key:
        print("❌ 請使用 --file-key 或在 config 的 figma.fileKey 設定 Figma 檔案 key。")
        return 1
    if not args.output_path:
        print("❌ 請使用 --output-path 指定 TypeScript 輸出路徑。")
        return 1
    client = _client_or_exit(sync_config)
    if client is None:
        return 1

    print(f"🔧 Generating TypeScript types from Figma: {file_key}")
    print("   Extracting design tokens...")
    try:
        groups = TokenService(client).extract_design_tokens(file_key)
    except (FetchError, ValueError) as e:
        print(f"❌ Failed to generate types: {e}")
        return 1

    if not groups:
        print("   ⚠️  No design tokens found in the file")
        return 0
    total = count_tokens(groups)
    print(f"   ✅ Extracted {total} design tokens")

    content = to_typed_namespace(
        groups,
        namespace=args.namespace,
        include_descriptions=args.include_descriptions,
        include_metadata=args.include_metadata,
        strict=args.strict,
    )
    try:
        path = write_output(content, args.output_path)
    except OSError as e:
        print(f"❌ Failed to write {args.output_path}: {e}")
        return 1
    print(f"   ✅ TypeScript types written to: {path}")

    print("\n📊 Type Generation Summary:")
    print(f"  📁 File: {file_key}")
    print(f"  📝 Output: {args.output_path}")
    print(f"  🏷️  Namespace: {args.namespace}")
    print(f"  📊 Total Groups: {len(groups)}")
    print(f"  🎨 Total Tokens: {total}")
    _print_group_counts(groups, indent="    ")
    return 0


def cmd_projects(args, config: dict, sync_config: SyncConfig) -> int:
    """Projects: 列出 team 的專案，或單一專案的檔案."""
    project_id = args.project_id
    team_id = args.team_id or sync_config.team_id
    if not project_id and not team_id:
        project_id = sync_config.project_id
    if not project_id and not team_id:
        print("❌ 請使用 --team-id / --project-id，或設定 FIGMA_TEAM_ID / FIGMA_PROJECT_ID。")
        return 1
    client = _client_or_exit(sync_config)
    if client is None:
        return 1

    try:
        if project_id:
            projects = [client.get_project(project_id)]
        else:
            projects = client.get_team_projects(team_id)
    except FetchError as e:
        print(f"❌ {e}")
        return 1

    if not projects:
        print("   ℹ️  No projects found.")
        return 0
    for project in projects:
        print(f"📂 {project.name} ({project.id})")
        for f in project.files:
            print(f"   - {f.name} [{f.key}]")
    return 0


def cmd_images(args, config: dict, sync_config: SyncConfig) -> int:
    """Images: 取得節點的算繪圖片 URL."""
    file_key = _resolve_file_key(args, sync_config)
    node_ids = [i.strip() for i in (args.ids or "").split(",") if i.strip()]
    if not file_key or not node_ids:
        print("❌ images 需要 --file-key 與 --ids。")
        return 1
    client = _client_or_exit(sync_config)
    if client is None:
        return 1

    try:
        images = client.get_images(file_key, node_ids, format=args.format, scale=args.scale)
    except (ValueError, FetchError) as e:
        print(f"❌ {e}")
        return 1

    for node_id, url in images.items():
        print(f"  {node_id}: {url or '(render failed)'}")
    return 0


def cmd_comments(args, config: dict, sync_config: SyncConfig) -> int:
    """Comments: 列出檔案留言."""
    file_key = _resolve_file_key(args, sync_config)
    if not file_key:
        print("❌ 請使用 --file-key 或在 config 的 figma.fileKey 設定 Figma 檔案 key。")
        return 1
    client = _client_or_exit(sync_config)
    if client is None:
        return 1

    try:
        comments = client.get_comments(file_key)
    except FetchError as e:
        print(f"❌ {e}")
        return 1

    print(f"💬 {len(comments)} comments")
    for comment in comments:
        user = (comment.get("user") or {}).get("handle", "?")
        print(f"  [{comment.get('created_at', '')}] {user}: {comment.get('message', '')}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="figma-tokens",
        description="Sync design tokens from Figma to a local design system",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", "-c", default=DEFAULT_CONFIG_PATH, help="Config path")
    parser.add_argument("--version", "-v", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", action="store_true", help="Debug logging (HTTP requests)")
    sub = parser.add_subparsers(dest="command")

    sync_p = sub.add_parser("sync", help="Figma → design token file",
        epilog="Examples:\n  figma-tokens sync -f ABC123 -o tokens/design-tokens.json\n  figma-tokens sync -f ABC123 -o styles/tokens.css -F css --validate",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    sync_p.add_argument("--file-key", "-f", help="Figma file key to sync from")
    sync_p.add_argument("--output-path", "-o", help="Output file path")
    sync_p.add_argument("--format", "-F", help=f"Output format ({', '.join(FORMATS)}), default json")
    sync_p.add_argument("--validate", action="store_true", help="Validate Figma file before syncing")
    sync_p.add_argument("--dry-run", action="store_true", help="Show what would be synced without writing files")
    sync_p.add_argument("--strict", action="store_true", help="Fail on duplicate token names within a group")

    watch_p = sub.add_parser("watch", help="Re-sync periodically",
        epilog="Examples:\n  figma-tokens watch -f ABC123 -o tokens.json --interval 60000",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    watch_p.add_argument("--file-key", "-f", help="Figma file key")
    watch_p.add_argument("--output-path", "-o", help="Output file path")
    watch_p.add_argument("--format", "-F", help=f"Output format ({', '.join(FORMATS)})")
    watch_p.add_argument("--interval", type=int, help="Sync interval in ms (default FIGMA_SYNC_INTERVAL)")
    watch_p.add_argument("--strict", action="store_true", help="Fail on duplicate token names within a group")

    validate_p = sub.add_parser("validate", help="Validate Figma file structure")
    validate_p.add_argument("--file-key", "-f", help="Figma file key to validate")
    validate_p.add_argument("--detailed", "-d", action="store_true", help="Show detailed analysis")

    types_p = sub.add_parser("generate-types", help="Figma → TypeScript namespace types",
        epilog="Examples:\n  figma-tokens generate-types -f ABC123 -o src/types/tokens.ts\n  figma-tokens generate-types -f ABC123 -o tokens.d.ts -n DS --include-descriptions --strict",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    types_p.add_argument("--file-key", "-f", help="Figma file key to extract tokens from")
    types_p.add_argument("--output-path", "-o", help="Output TypeScript file path")
    types_p.add_argument("--namespace", "-n", default="FigmaTokens", help="TypeScript namespace name")
    types_p.add_argument("--include-descriptions", action="store_true", help="Include token descriptions in JSDoc comments")
    types_p.add_argument("--include-metadata", action="store_true", help="Include metadata types")
    types_p.add_argument("--strict", action="store_true", help="Use strict TypeScript types")

    projects_p = sub.add_parser("projects", help="List team projects or project files")
    projects_p.add_argument("--team-id", help="Figma team id")
    projects_p.add_argument("--project-id", help="Figma project id")

    images_p = sub.add_parser("images", help="Get rendered image URLs for nodes")
    images_p.add_argument("--file-key", "-f", help="Figma file key")
    images_p.add_argument("--ids", help="Comma separated node ids")
    images_p.add_argument("--format", choices=list(IMAGE_FORMATS), default="png", help="Image format")
    images_p.add_argument("--scale", type=float, default=1, help="Scale factor")

    comments_p = sub.add_parser("comments", help="List file comments")
    comments_p.add_argument("--file-key", "-f", help="Figma file key")

    return parser


_COMMANDS = {
    "sync": cmd_sync,
    "watch": cmd_watch,
    "validate": cmd_validate,
    "generate-types": cmd_generate_types,
    "projects": cmd_projects,
    "images": cmd_images,
    "comments": cmd_comments,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    handler = _COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 0

    load_env()
    config = load_config(args.config)
    sync_config = load_sync_config(config)
    return handler(args, config, sync_config)


if __name__ == "__main__":
    sys.exit(main())
