"""
Lake Temple offerings

The temple's altar pages are laid out too irregularly to scrape reliably, so
the offerings are maintained here by hand and written through the same
upsert path as scraped categories.
"""

from typing import Any, Dict, List

IMAGE_BASE = "https://static.wikia.nocookie.net/coralisland/images"


def _item(name: str, quantity: int = 1, **extra: str) -> Dict[str, Any]:
    item: Dict[str, Any] = {'name': name, 'quantity': quantity}
    item.update(extra)
    return item


LAKE_TEMPLE_OFFERINGS: Dict[str, List[Dict[str, Any]]] = {
    "Crop Altar": [
        {
            'name': "Essential Resources",
            'items': [
                _item("Wood", 10),
                _item("Stone", 10),
                _item("Fiber", 10),
                _item("Sap", 10),
                _item("Any tree seed", 3, note="Maple Seeds, Oak Seeds, or Pine Cone"),
            ],
            'reward': "Recycling Machine",
        },
        {
            'name': "Spring Sesajen",
            'items': [_item("Turnip"), _item("Carrot"), _item("Daisy"), _item("Wasabi"), _item("Morel")],
            'reward': "Sugarcane Seeds",
        },
        {
            'name': "Summer Sesajen",
            'items': [_item("Blueberry"), _item("Hot Pepper"), _item("Sunflower"), _item("Shallot"), _item("Hibiscus")],
            'reward': "Tomato Seeds",
        },
        {
            'name': "Fall Sesajen",
            'items': [
                _item("Pumpkin"),
                _item("Rice", quality="bronze"),
                _item("Orchid"),
                _item("Black Trumpet"),
                _item("Fig"),
            ],
            'reward': "Barley Seeds",
        },
        {
            'name': "Winter Sesajen",
            'items': [
                _item("Brussel Sprouts"),
                _item("Kale"),
                _item("Rose Hip"),
                _item("Snowdrop", quality="osmium"),
                _item("Tea Leaf"),
            ],
            'reward': "Tea Seed",
        },
        {
            'name': "Ocean Scavengables",
            'items': [
                _item("Sea Salt", 5),
                _item("Eastern Oyster", 5),
                _item("Blue Mussel", 5),
                _item("Any Kelp", 10, note="Kelp, Sea Lettuce, Wakame, etc."),
                _item("Any Shell", 10, note="Cowry, Conch, etc."),
            ],
            'reward': "Dehydrator",
        },
    ],
    "Catch Altar": [
        {
            'name': "Fresh Water Fish",
            'items': [_item("Catfish"), _item("Tilapia"), _item("Rainbow Fish"), _item("Silver Arowana"), _item("Koi")],
            'reward': "Large Fish Bait",
        },
        {
            'name': "Salt Water Fish",
            'items': [
                _item("Pink Snapper"),
                _item("Lionfish"),
                _item("Asian Sheepshead"),
                _item("Yellowfin Tuna"),
                _item("Sardine"),
            ],
            'reward': "Small Fish Bait",
        },
        {
            'name': "Rare Fish",
            'items': [
                _item("Sturgeon"),
                _item("Gator Gar"),
                _item("Arapaima"),
                _item("Giant Sea Bass"),
                _item("Yellow Moray Eel"),
            ],
            'reward': "Fish Pond",
        },
        {
            'name': "Day Insect",
            'items': [
                _item("Pipevine Swallowtail Butterfly"),
                _item("Tiger Beetle"),
                _item("Yucca Moth"),
                _item("Assam Silk Moth"),
                _item("Monarch Caterpillar"),
            ],
            'reward': "Bee House",
        },
        {
            'name': "Night Insect",
            'items': [
                _item("Firefly"),
                _item("Cecropia Caterpillar"),
                _item("Centipede"),
                _item("Rove Beetle"),
                _item("Atlas Moth"),
            ],
            'reward': "Tap",
        },
        {
            'name': "Ocean Critters",
            'items': [
                _item("Cannonball Jellyfish"),
                _item("Hermit Crab"),
                _item("Sexy Shrimp"),
                _item("Sunflower Sea Star"),
                _item("Pom-pom Crab"),
            ],
            'reward': "Crawler Trap",
        },
    ],
    "Advanced Altar": [
        {
            'name': "Barn Animals",
            'items': [
                _item("Milk"),
                _item("Goat Milk"),
                _item("Wool"),
                _item("Large Goat Milk"),
                _item("Large Wool"),
                _item("Large Milk"),
            ],
            'reward': "Cheese Press",
        },
        {
            'name': "Coop Animals",
            'items': [_item("Egg"), _item("Duck Egg"), _item("Large Egg"), _item("Large Duck Egg")],
            'reward': "Mayonnaise Machine",
        },
        {
            'name': "Basic Cooking",
            'items': [_item("Smoothie"), _item("Grilled Fish"), _item("Tomato Soup"), _item("Onigiri"), _item("Fried Rice")],
            'reward': "Oil Press",
        },
        {
            'name': "Basic Artisan",
            'items': [
                _item("Any Mayonnaise"),
                _item("Any Fruit Juice"),
                _item("Any Butter"),
                _item("Any Dried Scavengeable"),
                _item("Any Pickle"),
            ],
            'reward': "Keg",
        },
        {
            'name': "Fruit Plant",
            'items': [
                _item("Rambutan", quality="silver"),
                _item("Durian", quality="silver"),
                _item("Mango", quality="silver"),
                _item("Dragonfruit", quality="silver"),
                _item("Apple", quality="silver"),
            ],
            'reward': "Sprinkler II",
        },
        {
            'name': "Monster Drop",
            'items': [
                _item("Silky Fur", 5),
                _item("Monster Essence", 5),
                _item("Bat Wing", 5),
                _item("Tough Meat", 5),
                _item("Slime Goop", 5),
            ],
            'reward': "Explosive III",
        },
    ],
    "Rare Altar": [
        {
            'name': "Rare Crops",
            'items': [
                _item("Snowdrop", quality="osmium"),
                _item("Lemon", quality="osmium"),
                _item("Almond", quality="osmium"),
                _item("Cocoa Bean", quality="osmium"),
                _item("Coffee Bean", quality="osmium"),
            ],
            'reward': "Sprinkler III",
        },
        {
            'name': "Greenhouse Crops",
            'items': [_item("Garlic"), _item("Cotton"), _item("Cactus"), _item("Vanilla"), _item("Saffron")],
            'reward': "Slime of Replication",
        },
        {
            'name': "Advanced Cooking",
            'items': [_item("Vegan Taco"), _item("Apple Pie"), _item("Serabi"), _item("Pad Thai"), _item("Es Cendol")],
            'reward': "Jamu Recipe",
        },
        {
            'name': "Master Artisan",
            'items': [
                _item("Titan Arum Black Honey"),
                _item("Any Kimchi"),
                _item("Any Wine"),
                _item("Fermented Goat Cheese Wheel"),
                _item("White Truffle Oil"),
            ],
            'reward': "Aging Barrel",
        },
        {
            'name': "Rare Animal Products",
            'items': [
                _item("Black Truffle"),
                _item("Large Quail Egg"),
                _item("Large Llama Wool"),
                _item("Large Feather"),
                _item("Large Gesha Coffee Bean"),
            ],
            'reward': "Auto Petter",
        },
        {
            'name': "Kelp Essence",
            'items': [
                _item("Gold Bar"),
                _item("Silver Bar"),
                _item("Bronze Bar"),
                _item("Gold Kelp Essence"),
                _item("Silver Kelp Essence"),
                _item("Bronze Kelp Essence"),
            ],
            'reward': "Osmium Kelp Essence",
        },
    ],
}

OFFERING_IMAGES = {
    "Essential Resources": f"{IMAGE_BASE}/b/b8/Essential_Resources_Offering.png",
    "Spring Sesajen": f"{IMAGE_BASE}/d/d2/Spring_Sesajen_Offering.png",
    "Summer Sesajen": f"{IMAGE_BASE}/d/de/Summer_Sesajen_Offering.png",
    "Fall Sesajen": f"{IMAGE_BASE}/b/b6/Fall_Sesajen_Offering.png",
    "Winter Sesajen": f"{IMAGE_BASE}/e/e7/Winter_Sesajen_Offering.png",
    "Ocean Scavengables": f"{IMAGE_BASE}/1/1b/Ocean_Scavengables_Offering.png",
    "Fresh Water Fish": f"{IMAGE_BASE}/f/f6/Fresh_Water_Fish_Offering.png",
    "Salt Water Fish": f"{IMAGE_BASE}/3/35/Salt_Water_Fish_Offering.png",
    "Rare Fish": f"{IMAGE_BASE}/f/f6/Rare_Fish_Offering.png",
    "Day Insect": f"{IMAGE_BASE}/6/64/Day_Insect_Offering.png",
    "Night Insect": f"{IMAGE_BASE}/c/c6/Night_Insect_Offering.png",
    "Ocean Critters": f"{IMAGE_BASE}/1/16/Ocean_Critters_Offering.png",
    "Barn Animals": f"{IMAGE_BASE}/7/70/Barn_Animals_Offering.png",
    "Coop Animals": f"{IMAGE_BASE}/2/22/Coop_Animals_Offering.png",
    "Basic Cooking": f"{IMAGE_BASE}/9/93/Basic_Cooking_Offering.png",
    "Basic Artisan": f"{IMAGE_BASE}/6/69/Basic_Artisan_Offering.png",
    "Fruit Plant": f"{IMAGE_BASE}/3/37/Fruit_Plant_Offering.png",
    "Monster Drop": f"{IMAGE_BASE}/0/0e/Monster_Drop_Offering.png",
    "Rare Crops": f"{IMAGE_BASE}/9/96/Rare_Crops_Offering.png",
    "Greenhouse Crops": f"{IMAGE_BASE}/4/4a/Greenhouse_Crops_Offering.png",
    "Advanced Cooking": f"{IMAGE_BASE}/a/a1/Advanced_Cooking_Offering.png",
    "Master Artisan": f"{IMAGE_BASE}/5/5a/Master_Artisan_Offering.png",
    "Rare Animal Products": f"{IMAGE_BASE}/e/e2/Rare_Animal_Products_Offering.png",
    "Kelp Essence": f"{IMAGE_BASE}/8/8c/Kelp_Essence_Offering.png",
}


def build_offerings() -> List[Dict[str, Any]]:
    """
    Build one catalog record per offering

    The altar doubles as the record's only location so offerings can be
    filtered by altar like any other item.
    """
    records = []
    for altar, offerings in LAKE_TEMPLE_OFFERINGS.items():
        for offering in offerings:
            records.append({
                'name': offering['name'],
                'seasons': [],
                'time_of_day': [],
                'weather': [],
                'locations': [altar],
                'image_url': OFFERING_IMAGES.get(offering['name']),
                'metadata': {
                    'altar': altar,
                    'required_items': [dict(item) for item in offering['items']],
                    'reward': offering['reward'],
                    'item_count': len(offering['items']),
                },
            })
    return records
