"""Categories, FAQs, site statistics and reference data seeding."""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from qa_forum.models.answer import Answer
from qa_forum.models.category import Category, Faq
from qa_forum.models.question import Question
from qa_forum.schemas.category import CategoryCreate, FaqCreate, StatsResponse
from qa_forum.services.base import ConflictError, NotFoundError, ValidationError
from qa_forum.services.policy import Actor, ensure_can_manage_users

logger = logging.getLogger(__name__)


async def list_categories(db: AsyncSession) -> list[Category]:
    result = await db.execute(select(Category).order_by(Category.id))
    return list(result.scalars().all())


async def get_category_by_slug(db: AsyncSession, slug: str) -> Category:
    """Look up a category by its slug.

    Raises:
        NotFoundError: If no category has that slug
    """
    result = await db.execute(select(Category).where(Category.slug == slug))
    category = result.scalar_one_or_none()
    if category is None:
        raise NotFoundError("Category not found")
    return category


async def create_category(
    db: AsyncSession, data: CategoryCreate, actor: Actor | None = None
) -> Category:
    """Add a category. Admin-only when called on behalf of a user.

    Raises:
        ConflictError: If the name or slug is already used
    """
    if actor is not None:
        ensure_can_manage_users(actor)

    existing = await db.execute(
        select(Category.id).where((Category.name == data.name) | (Category.slug == data.slug))
    )
    if existing.first() is not None:
        raise ConflictError("Category name or slug already exists")

    category = Category(**data.model_dump())
    db.add(category)
    try:
        await db.flush()
    except IntegrityError:
        raise ConflictError("Category name or slug already exists") from None

    logger.info("Category %s created", category.slug)
    return category


async def list_faqs(db: AsyncSession) -> list[Faq]:
    """FAQs in display order, with categories loaded."""
    result = await db.execute(
        select(Faq).options(selectinload(Faq.category)).order_by(Faq.order, Faq.id)
    )
    return list(result.scalars().all())


async def create_faq(db: AsyncSession, data: FaqCreate, actor: Actor | None = None) -> Faq:
    """Add an FAQ entry. Admin-only when called on behalf of a user.

    Raises:
        ValidationError: If the category does not exist
    """
    if actor is not None:
        ensure_can_manage_users(actor)

    category = await db.get(Category, data.category_id)
    if category is None:
        raise ValidationError(
            "Invalid data",
            errors=[{"loc": ["body", "category_id"], "msg": "Category does not exist"}],
        )

    faq = Faq(**data.model_dump())
    faq.category = category
    db.add(faq)
    await db.flush()
    return faq


async def get_stats(db: AsyncSession) -> StatsResponse:
    """Count questions, answers and categories."""
    total_questions = (await db.execute(select(func.count(Question.id)))).scalar_one()
    total_answers = (await db.execute(select(func.count(Answer.id)))).scalar_one()
    categories = (await db.execute(select(func.count(Category.id)))).scalar_one()
    return StatsResponse(
        total_questions=total_questions,
        total_answers=total_answers,
        categories=categories,
    )


CATEGORY_SEED: list[dict[str, str]] = [
    {
        "name": "Installation",
        "slug": "installation",
        "description": "Help with installing Linux distributions and packages",
        "icon": "package",
        "color": "#f97316",
    },
    {
        "name": "Hardware",
        "slug": "hardware",
        "description": "Hardware compatibility and driver issues",
        "icon": "cpu",
        "color": "#ef4444",
    },
    {
        "name": "Software",
        "slug": "software",
        "description": "Application installation and configuration",
        "icon": "hard-drive",
        "color": "#8b5cf6",
    },
    {
        "name": "Networking",
        "slug": "networking",
        "description": "Network configuration and troubleshooting",
        "icon": "wifi",
        "color": "#06b6d4",
    },
    {
        "name": "Command Line",
        "slug": "command-line",
        "description": "Terminal, shell, and command line usage",
        "icon": "terminal",
        "color": "#22c55e",
    },
    {
        "name": "System Configuration",
        "slug": "system-config",
        "description": "System settings and configuration",
        "icon": "settings",
        "color": "#f59e0b",
    },
]

# (category slug, question, answer, code snippet)
FAQ_SEED: list[tuple[str, str, str, str]] = [
    (
        "installation",
        "How do I update my system packages?",
        "The command depends on your distribution: apt on Debian/Ubuntu, "
        "dnf on Fedora/RHEL and pacman on Arch.",
        "# Debian/Ubuntu\nsudo apt update && sudo apt upgrade\n\n"
        "# Fedora/RHEL\nsudo dnf upgrade\n\n# Arch Linux\nsudo pacman -Syu",
    ),
    (
        "system-config",
        "How do I check my Linux distribution version?",
        "Read /etc/os-release or run lsb_release; uname shows the kernel version.",
        "cat /etc/os-release\nlsb_release -a\nuname -a",
    ),
    (
        "command-line",
        "How do I find and kill a process?",
        "Find the process ID with ps, top or htop, then stop it with kill. "
        "kill -9 forces termination.",
        "ps aux | grep process_name\nkill <PID>\nkill -9 <PID>\npkill process_name",
    ),
    (
        "networking",
        "How do I configure a static IP address?",
        "Most modern systems use NetworkManager or systemd-networkd; nmcli "
        "configures NetworkManager from the command line.",
        'nmcli con mod "Connection Name" \\\n  ipv4.addresses 192.168.1.100/24 \\\n'
        '  ipv4.gateway 192.168.1.1 \\\n  ipv4.dns "8.8.8.8 8.8.4.4" \\\n'
        '  ipv4.method manual\nnmcli con down "Connection Name" && '
        'nmcli con up "Connection Name"',
    ),
    (
        "system-config",
        "How do I check disk space usage?",
        "df reports filesystem usage and du reports directory sizes; -h prints "
        "human-readable sizes.",
        "df -h\ndu -sh .\ndu -sh */\nfind / -size +100M -type f 2>/dev/null",
    ),
    (
        "installation",
        "How do I install a .deb package?",
        "Use apt, which resolves dependencies, or dpkg followed by apt install -f.",
        "sudo apt install ./package.deb\nsudo dpkg -i package.deb\nsudo apt install -f",
    ),
    (
        "hardware",
        "How do I check hardware information?",
        "lshw gives a full inventory; lscpu, lsblk and lspci focus on CPUs, "
        "disks and PCI devices.",
        "sudo lshw -short\nlscpu\nfree -h\nlsblk\nlspci",
    ),
    (
        "command-line",
        "How do I change file permissions?",
        "chmod changes permissions in octal or symbolic notation; chown changes ownership.",
        "chmod 755 file.sh\nchmod 644 file.txt\nchmod +x script.sh\nchown user:group file",
    ),
]


async def seed_reference_data(db: AsyncSession) -> bool:
    """Create the default categories and FAQs.

    Returns:
        False if categories already exist and nothing was done
    """
    if (await db.execute(select(Category.id).limit(1))).first() is not None:
        logger.info("Reference data already seeded")
        return False

    by_slug: dict[str, Category] = {}
    for entry in CATEGORY_SEED:
        category = Category(**entry)
        db.add(category)
        by_slug[category.slug] = category
    await db.flush()

    for order, (slug, question, answer, code) in enumerate(FAQ_SEED, start=1):
        db.add(
            Faq(
                question=question,
                answer=answer,
                category_id=by_slug[slug].id,
                order=order,
                code_snippet=code,
                code_language="bash",
            )
        )
    await db.flush()

    logger.info("Seeded %d categories and %d FAQs", len(CATEGORY_SEED), len(FAQ_SEED))
    return True
