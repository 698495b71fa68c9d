"""Management command to seed blog categories and posts for Sanatoni Mart."""

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from sanatoni.content.models import BlogCategory, BlogPost, PublishStatus
from sanatoni.content.services.blog import sync_tags

User = get_user_model()


CATEGORIES = [
    {
        "name": "Puja Essentials",
        "slug": "puja-essentials",
        "description": "Guides to the items every home altar needs, from diyas to incense.",
        "sort_order": 1,
    },
    {
        "name": "Festivals",
        "slug": "festivals",
        "description": "Preparing for Durga Puja, Diwali, Janmashtami and the festivals through the year.",
        "sort_order": 2,
    },
    {
        "name": "Rituals & Traditions",
        "slug": "rituals",
        "description": "The meaning behind everyday rituals and how families keep them alive.",
        "sort_order": 3,
    },
    {
        "name": "Shopping Guides",
        "slug": "shopping-guides",
        "description": "How to choose brass, copper, clothing and gifts that last.",
        "sort_order": 4,
    },
    {
        "name": "Store News",
        "slug": "store-news",
        "description": "New arrivals, delivery updates and announcements from Sanatoni Mart.",
        "sort_order": 5,
    },
]


POSTS = [
    {
        "slug": "setting-up-a-home-altar",
        "title": "Setting Up a Home Altar: A Beginner's Checklist",
        "category_slug": "puja-essentials",
        "excerpt": "Everything you need for a simple, complete home altar, and how to arrange it.",
        "tags": ["Altar", "Puja", "Beginners"],
        "is_featured": True,
        "content": (
            "<p>A home altar does not need to be large. A clean shelf facing east, a cloth, "
            "an image or murti, a diya and an incense holder are enough to begin.</p>"
            "<h2>The essentials</h2>"
            "<ul><li>Brass or clay diya</li><li>Incense and a holder</li>"
            "<li>A small bell</li><li>A plate for offerings</li><li>Fresh flowers</li></ul>"
            "<p>Keep the space uncluttered and replace flowers daily.</p>"
        ),
    },
    {
        "slug": "durga-puja-shopping-list",
        "title": "Your Durga Puja Shopping List",
        "category_slug": "festivals",
        "excerpt": "Plan ahead for the five days of Durga Puja with this complete list.",
        "tags": ["Durga Puja", "Festivals", "Checklist"],
        "is_featured": True,
        "content": (
            "<p>Durga Puja is the busiest season of the year. Ordering early means your "
            "items arrive before Mahalaya.</p>"
            "<h2>For the puja</h2>"
            "<p>Conch shell, sindoor, alta, new cloth for the goddess, and dhuno for the "
            "evening aarti.</p>"
            "<h2>For the family</h2>"
            "<p>New clothes for each day, sweets for guests, and gifts for elders.</p>"
        ),
    },
    {
        "slug": "caring-for-brass-items",
        "title": "How to Clean and Care for Brass Puja Items",
        "category_slug": "shopping-guides",
        "excerpt": "Keep brass diyas, plates and bells shining with household ingredients.",
        "tags": ["Brass", "Care", "Puja"],
        "content": (
            "<p>Brass darkens with use and smoke. A paste of tamarind or lemon with salt "
            "lifts tarnish without scratching.</p>"
            "<p>Rinse with warm water, dry immediately with a soft cloth, and store items "
            "wrapped in cotton between festivals.</p>"
        ),
    },
    {
        "slug": "meaning-of-the-evening-aarti",
        "title": "The Meaning of the Evening Aarti",
        "category_slug": "rituals",
        "excerpt": "Why the lamp is circled, what the bell signifies, and how to perform aarti at home.",
        "tags": ["Aarti", "Rituals"],
        "content": (
            "<p>Aarti is performed at dusk as the lamps are lit. The flame is circled "
            "clockwise before the deity while a bell is rung and a song is sung.</p>"
            "<p>Afterwards the flame is offered to everyone present, who pass their hands "
            "over it and touch their eyes.</p>"
        ),
    },
    {
        "slug": "cash-on-delivery-across-bangladesh",
        "title": "Cash on Delivery Now Available Across Bangladesh",
        "category_slug": "store-news",
        "excerpt": "We now deliver to every division with cash on delivery.",
        "tags": ["Delivery", "Announcements"],
        "content": (
            "<p>Orders can now be paid in cash on delivery in every division. Delivery "
            "inside Dhaka takes one to two days; other areas take three to seven.</p>"
            "<p>Track any order with your order number and email from the Track Order page.</p>"
        ),
    },
]


class Command(BaseCommand):
    help = "Seed blog categories and posts"

    def add_arguments(self, parser):
        parser.add_argument(
            "--force",
            action="store_true",
            help="Delete and recreate existing categories and posts",
        )

    def handle(self, *args, **options):
        author = User.objects.filter(is_superuser=True).first()
        if not author:
            self.stdout.write(
                self.style.WARNING("No superuser found. Posts will be created without author.")
            )

        self.stdout.write("\nCreating blog categories...")
        category_map = {}
        for cat_data in CATEGORIES:
            existing = BlogCategory.objects.filter(slug=cat_data["slug"]).first()
            if existing:
                if options["force"]:
                    existing.delete()
                    self.stdout.write(f"  Deleted existing category: {cat_data['name']}")
                else:
                    self.stdout.write(f"  Skipping existing category: {cat_data['name']}")
                    category_map[cat_data["slug"]] = existing
                    continue

            category_map[cat_data["slug"]] = BlogCategory.objects.create(**cat_data)
            self.stdout.write(self.style.SUCCESS(f"  Created: {cat_data['name']}"))

        self.stdout.write("\nCreating blog posts...")
        for post_data in POSTS:
            existing = BlogPost.objects.filter(slug=post_data["slug"]).first()
            if existing:
                if options["force"]:
                    existing.delete()
                    self.stdout.write(f"  Deleted existing post: {post_data['title']}")
                else:
                    self.stdout.write(f"  Skipping existing post: {post_data['title']}")
                    continue

            post = BlogPost.objects.create(
                slug=post_data["slug"],
                title=post_data["title"],
                content=post_data["content"],
                excerpt=post_data["excerpt"],
                category=category_map.get(post_data["category_slug"]),
                status=PublishStatus.PUBLISHED,
                is_featured=post_data.get("is_featured", False),
                author=author,
                meta_title=post_data["title"][:60],
                meta_description=post_data["excerpt"][:160],
            )
            sync_tags(post, post_data.get("tags", []))

            self.stdout.write(self.style.SUCCESS(f"  Created and published: {post_data['title']}"))

        self.stdout.write(self.style.SUCCESS("\nBlog seed complete!"))
        self.stdout.write(f"  Categories: {len(CATEGORIES)}")
        self.stdout.write(f"  Posts: {len(POSTS)}")
