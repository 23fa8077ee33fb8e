"""Lookup tables shared by the URL parsing modules."""

# Glyph -> canonical decimal value. Values are the ones rendered back as glyphs.
FRACTION_GLYPHS = {
    "¼": 0.25,
    "½": 0.5,
    "¾": 0.75,
    "⅓": 0.333,
    "⅔": 0.667,
}
FRACTION_CHARS = "".join(FRACTION_GLYPHS)

FRACTION_WORDS = {
    "three-quarters": 0.75,
    "two-thirds": 0.667,
    "half": 0.5,
    "quarter": 0.25,
    "third": 0.333,
}

# Canonical unit for every accepted spelling.
UNIT_SYNONYMS = {
    "tbsp": "tablespoons",
    "tbs": "tablespoons",
    "tbl": "tablespoons",
    "tablespoon": "tablespoons",
    "tablespoons": "tablespoons",
    "tsp": "teaspoons",
    "teaspoon": "teaspoons",
    "teaspoons": "teaspoons",
    "oz": "ounces",
    "ounce": "ounces",
    "ounces": "ounces",
    "lb": "pounds",
    "lbs": "pounds",
    "pound": "pounds",
    "pounds": "pounds",
    "cup": "cups",
    "cups": "cups",
    "g": "grams",
    "gram": "grams",
    "grams": "grams",
    "kg": "kilograms",
    "kilogram": "kilograms",
    "kilograms": "kilograms",
    "ml": "milliliters",
    "milliliter": "milliliters",
    "milliliters": "milliliters",
    "l": "liters",
    "liter": "liters",
    "liters": "liters",
    "litre": "liters",
    "litres": "liters",
    "pint": "pints",
    "pints": "pints",
    "pt": "pints",
    "quart": "quarts",
    "quarts": "quarts",
    "qt": "quarts",
    "clove": "cloves",
    "cloves": "cloves",
    "can": "cans",
    "cans": "cans",
    "pinch": "pinches",
    "pinches": "pinches",
    "slice": "slices",
    "slices": "slices",
    "stick": "sticks",
    "sticks": "sticks",
    "package": "packages",
    "packages": "packages",
    "pkg": "packages",
}

MEASUREMENT_PATTERN = (
    r"\d+\s*(?:cups?|tbsps?|tsps?|oz|g|kg|ml|l|pounds?|lbs?|teaspoons?|tablespoons?)\b"
)

# Ordered: first matching category wins. No keyword may contain a keyword of an
# earlier category, and no keyword may appear twice.
CATEGORY_KEYWORDS = {
    "Spices & Seasonings": [
        "garlic powder",
        "onion powder",
        "chili powder",
        "curry powder",
        "black pepper",
        "red pepper flakes",
        "peppercorn",
        "cayenne",
        "paprika",
        "cumin",
        "cinnamon",
        "nutmeg",
        "oregano",
        "turmeric",
        "bay leaf",
        "bay leaves",
        "kosher salt",
        "sea salt",
        "vanilla",
        "seasoning",
        "spice",
    ],
    "Meat & Seafood": [
        "chicken",
        "beef",
        "pork",
        "lamb",
        "turkey",
        "bacon",
        "ham",
        "sausage",
        "steak",
        "veal",
        "duck",
        "chorizo",
        "prosciutto",
        "meat",
        "fish",
        "salmon",
        "tuna",
        "cod",
        "tilapia",
        "halibut",
        "shrimp",
        "prawn",
        "crab",
        "lobster",
        "scallop",
        "anchov",
        "seafood",
    ],
    "Produce": [
        "tomato",
        "potato",
        "onion",
        "garlic",
        "shallot",
        "scallion",
        "lettuce",
        "spinach",
        "kale",
        "cabbage",
        "cucumber",
        "bell pepper",
        "jalapeno",
        "zucchini",
        "squash",
        "broccoli",
        "cauliflower",
        "carrot",
        "celery",
        "mushroom",
        "avocado",
        "eggplant",
        "green bean",
        "apple",
        "banana",
        "lemon",
        "lime",
        "orange",
        "berries",
        "cilantro",
        "parsley",
        "basil",
        "mint",
        "thyme",
        "rosemary",
        "sage",
        "dill",
        "ginger",
        "herb",
        "vegetable",
    ],
    "Dairy & Eggs": [
        "milk",
        "cream",
        "cheese",
        "butter",
        "yogurt",
        "egg",
        "parmesan",
        "mozzarella",
        "ricotta",
        "cheddar",
        "feta",
        "ghee",
        "half-and-half",
    ],
    "Bakery": [
        "bread",
        "tortilla",
        "pita",
        "bagel",
        "baguette",
        "croissant",
        "brioche",
        "naan",
        "buns",
        "pie crust",
        "puff pastry",
    ],
    "Pantry": [
        "flour",
        "sugar",
        "salt",
        "oil",
        "vinegar",
        "rice",
        "pasta",
        "spaghetti",
        "noodle",
        "bean",
        "lentil",
        "chickpea",
        "broth",
        "stock",
        "sauce",
        "honey",
        "syrup",
        "oats",
        "cornstarch",
        "baking soda",
        "baking powder",
        "yeast",
        "nut",
        "almond",
        "chocolate",
        "cocoa",
        "mustard",
        "ketchup",
        "mayonnaise",
        "panko",
    ],
}
OTHER_CATEGORY = "Other"

# Display order of grocery sections.
SECTION_ORDER = [
    "Produce",
    "Meat & Seafood",
    "Dairy & Eggs",
    "Bakery",
    "Pantry",
    "Spices & Seasonings",
    OTHER_CATEGORY,
]

NAVIGATION_TERMS = [
    "skip to content",
    "jump to recipe",
    "print recipe",
    "save recipe",
    "read more",
    "subscribe",
    "newsletter",
    "sign in",
    "sign up",
    "log in",
    "login",
    "log out",
    "my account",
    "privacy policy",
    "terms of use",
    "terms of service",
    "cookie policy",
    "all rights reserved",
    "copyright",
    "advertisement",
    "follow us",
    "share on",
    "facebook",
    "twitter",
    "instagram",
    "pinterest",
    "youtube",
    "tiktok",
    "leave a comment",
    "comments",
    "related recipes",
    "you may also like",
    "main menu",
    "search",
]

EXTRA_FOOD_TERMS = [
    "water",
    "wine",
    "juice",
    "zest",
    "peas",
    "corn",
    "fruit",
    "pepper",
    "leaves",
    "powder",
    "extract",
    "paste",
    "cloves",
    "to taste",
]

COOKING_VERBS = {
    "add",
    "allow",
    "arrange",
    "bake",
    "beat",
    "blend",
    "boil",
    "bring",
    "broil",
    "brown",
    "brush",
    "chill",
    "chop",
    "combine",
    "cook",
    "cool",
    "cover",
    "cut",
    "dice",
    "divide",
    "drain",
    "drizzle",
    "fold",
    "fry",
    "garnish",
    "grate",
    "grease",
    "grill",
    "heat",
    "knead",
    "layer",
    "let",
    "line",
    "marinate",
    "mash",
    "melt",
    "mix",
    "place",
    "pour",
    "preheat",
    "reduce",
    "refrigerate",
    "remove",
    "repeat",
    "return",
    "roast",
    "roll",
    "saute",
    "sauté",
    "season",
    "serve",
    "set",
    "simmer",
    "slice",
    "spread",
    "sprinkle",
    "stir",
    "strain",
    "taste",
    "toss",
    "transfer",
    "top",
    "whisk",
}

COOKING_CONTEXT_TERMS = [
    "minute",
    "hour",
    "oven",
    "pan",
    "skillet",
    "pot",
    "bowl",
    "heat",
    "degrees",
    "°",
    "until",
    "simmer",
    "boil",
    "bake",
]

UNNECESSARY_QUALIFIERS = [
    "fresh",
    "ripe",
    "raw",
    "whole",
    "regular",
    "plain",
    "basic",
    "standard",
    "normal",
    "common",
    "ordinary",
    "simple",
    "pure",
    "natural",
    "traditional",
    "conventional",
    "typical",
    "usual",
    "everyday",
    "standard-issue",
]

ESSENTIAL_QUALIFIERS = [
    "organic",
    "frozen",
    "canned",
    "dried",
    "smoked",
    "roasted",
    "ground",
    "sliced",
    "diced",
    "minced",
    "chopped",
    "grated",
    "shredded",
    "crushed",
    "powdered",
    "whole grain",
    "low-fat",
    "fat-free",
    "sugar-free",
    "unsweetened",
    "sweetened",
    "salted",
    "unsalted",
    "raw",
    "cooked",
    "instant",
    "quick-cooking",
    "extra virgin",
    "virgin",
    "greek",
    "italian",
    "mexican",
    "thai",
    "japanese",
    "chinese",
    "french",
    "spanish",
]
