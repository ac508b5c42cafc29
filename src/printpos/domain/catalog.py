from __future__ import annotations

from printpos.domain.models import (
    AppState,
    Product,
    ProductCategory,
    Settings,
    Supply,
    SupplyCategory,
    SupplyUnit,
)

DEFAULT_SETTINGS = Settings()

_PAPER = SupplyCategory.PAPER
_SPIRAL = SupplyCategory.SPIRAL
_COVER = SupplyCategory.COVER
_SHEET = SupplyUnit.SHEET
_UNIT = SupplyUnit.UNIT

# id, name, category, current_stock, min_stock, unit, cost
_SUPPLY_ROWS = [
    ("paper_bond_80_a4", "Bond Paper 80gsm A4", _PAPER, 500, 50, _SHEET, 15),
    ("paper_bond_80_legal", "Bond Paper 80gsm Legal", _PAPER, 200, 30, _SHEET, 18),
    ("paper_bond_80_a3", "Bond Paper 80gsm A3", _PAPER, 150, 25, _SHEET, 30),
    ("paper_bond_120_a4", "Bond Paper 120gsm A4", _PAPER, 300, 40, _SHEET, 22),
    ("paper_bond_180_a4", "Bond Paper 180gsm A4", _PAPER, 200, 30, _SHEET, 35),
    ("paper_bond_240_a4", "Bond Paper 240gsm A4", _PAPER, 100, 20, _SHEET, 45),
    ("paper_coated_150_a4", "Coated Paper 150gsm A4", _PAPER, 250, 35, _SHEET, 28),
    ("paper_coated_200_a4", "Coated Paper 200gsm A4", _PAPER, 200, 30, _SHEET, 38),
    ("paper_coated_250_a4", "Coated Paper 250gsm A4", _PAPER, 150, 25, _SHEET, 48),
    ("paper_coated_150_a3", "Coated Paper 150gsm A3", _PAPER, 100, 20, _SHEET, 55),
    ("paper_coated_200_a3", "Coated Paper 200gsm A3", _PAPER, 80, 15, _SHEET, 75),
    ("paper_coated_250_a3", "Coated Paper 250gsm A3", _PAPER, 60, 12, _SHEET, 95),
    ("paper_photo_115", "Photo Paper 115gsm", _PAPER, 100, 20, _SHEET, 65),
    ("paper_photo_135", "Photo Paper 135gsm", _PAPER, 80, 15, _SHEET, 75),
    ("paper_photo_190", "Photo Paper 190gsm", _PAPER, 60, 12, _SHEET, 95),
    ("paper_photo_230", "Photo Paper 230gsm", _PAPER, 50, 10, _SHEET, 115),
    ("paper_photo_220_duplex", "Photo Paper 220gsm Double-Sided", _PAPER, 40, 8, _SHEET, 135),
    ("adhesive_a4", "Adhesive Paper A4", _PAPER, 120, 20, _SHEET, 85),
    ("adhesive_a3", "Adhesive Paper A3", _PAPER, 60, 12, _SHEET, 165),
    ("spiral_9mm", "Spiral 9mm", _SPIRAL, 100, 20, _UNIT, 45),
    ("spiral_14mm", "Spiral 14mm", _SPIRAL, 80, 15, _UNIT, 55),
    ("spiral_17mm", "Spiral 17mm", _SPIRAL, 70, 15, _UNIT, 65),
    ("spiral_20mm", "Spiral 20mm", _SPIRAL, 60, 12, _UNIT, 75),
    ("spiral_25mm", "Spiral 25mm", _SPIRAL, 50, 10, _UNIT, 85),
    ("spiral_33mm", "Spiral 33mm", _SPIRAL, 40, 8, _UNIT, 105),
    ("spiral_40mm", "Spiral 40mm", _SPIRAL, 30, 6, _UNIT, 125),
    ("spiral_50mm", "Spiral 50mm", _SPIRAL, 20, 5, _UNIT, 155),
    ("cover_clear", "Clear Cover", _COVER, 200, 30, _UNIT, 25),
    ("cover_color", "Colour Cover", _COVER, 150, 25, _UNIT, 35),
]

_PRINTING = ProductCategory.PRINTING
_PHOTO = ProductCategory.PHOTO
_ADHESIVE = ProductCategory.ADHESIVE

# id, name, category, price, cost, recipe, description
_PRODUCT_ROWS = [
    ("print_a4_bond80_single_color", "A4 Bond 80gsm Single-Sided Colour Print", _PRINTING, 150, 45,
     {"paper_bond_80_a4": 1}, "Colour print on A4 bond 80gsm paper"),
    ("print_a4_bond80_single_bw", "A4 Bond 80gsm Single-Sided B&W Print", _PRINTING, 80, 25,
     {"paper_bond_80_a4": 1}, "Black and white print on A4 bond 80gsm paper"),
    ("print_a4_bond80_double_color", "A4 Bond 80gsm Double-Sided Colour Print", _PRINTING, 250, 75,
     {"paper_bond_80_a4": 1}, "Double-sided colour print on A4 bond 80gsm paper"),
    ("print_a4_bond80_double_bw", "A4 Bond 80gsm Double-Sided B&W Print", _PRINTING, 130, 40,
     {"paper_bond_80_a4": 1}, "Double-sided black and white print on A4 bond 80gsm paper"),
    ("print_a3_bond80_single_color", "A3 Bond 80gsm Single-Sided Colour Print", _PRINTING, 300, 85,
     {"paper_bond_80_a3": 1}, "Colour print on A3 bond 80gsm paper"),
    ("print_a3_bond80_single_bw", "A3 Bond 80gsm Single-Sided B&W Print", _PRINTING, 150, 50,
     {"paper_bond_80_a3": 1}, "Black and white print on A3 bond 80gsm paper"),
    ("print_a4_coated150_color", "A4 Coated 150gsm Colour Print", _PRINTING, 220, 68,
     {"paper_coated_150_a4": 1}, "Colour print on A4 coated 150gsm paper"),
    ("print_a4_coated200_color", "A4 Coated 200gsm Colour Print", _PRINTING, 280, 88,
     {"paper_coated_200_a4": 1}, "Colour print on A4 coated 200gsm paper"),
    ("print_a4_coated250_color", "A4 Coated 250gsm Colour Print", _PRINTING, 350, 108,
     {"paper_coated_250_a4": 1}, "Colour print on A4 coated 250gsm paper"),
    ("photo_115", "Photo Print 115gsm", _PHOTO, 450, 145,
     {"paper_photo_115": 1}, "Print on 115gsm photo paper"),
    ("photo_190", "Photo Print 190gsm", _PHOTO, 650, 215,
     {"paper_photo_190": 1}, "Print on 190gsm photo paper"),
    ("photo_230", "Photo Print 230gsm", _PHOTO, 850, 275,
     {"paper_photo_230": 1}, "Print on 230gsm photo paper"),
    ("adhesive_print_a4", "A4 Adhesive Print", _ADHESIVE, 580, 185,
     {"adhesive_a4": 1}, "Print on A4 adhesive paper"),
    ("adhesive_print_a3", "A3 Adhesive Print", _ADHESIVE, 980, 305,
     {"adhesive_a3": 1}, "Print on A3 adhesive paper"),
]

# spiral size (mm), price, cost
_BINDING_ROWS = [
    (9, 450, 115),
    (14, 550, 145),
    (17, 650, 175),
    (20, 750, 205),
    (25, 850, 235),
    (33, 980, 275),
    (40, 1150, 315),
    (50, 1350, 365),
]


def initial_supplies() -> tuple[Supply, ...]:
    return tuple(
        Supply(id=sid, name=name, category=cat, current_stock=stock, min_stock=minimum, unit=unit, cost=cost)
        for sid, name, cat, stock, minimum, unit, cost in _SUPPLY_ROWS
    )


def initial_products() -> tuple[Product, ...]:
    products = [
        Product(id=pid, name=name, category=cat, price=price, cost=cost, required_supplies=dict(recipe), description=desc)
        for pid, name, cat, price, cost, recipe, desc in _PRODUCT_ROWS
    ]
    for size, price, cost in _BINDING_ROWS:
        products.append(
            Product(
                id=f"binding_{size}mm",
                name=f"Spiral Binding {size}mm",
                category=ProductCategory.BINDING,
                price=price,
                cost=cost,
                required_supplies={f"spiral_{size}mm": 1, "cover_clear": 2},
                description=f"Spiral binding {size}mm + 2 covers",
            )
        )
    return tuple(products)


def initial_state() -> AppState:
    return AppState(
        products=initial_products(),
        supplies=initial_supplies(),
        sales=(),
        expenses=(),
        cash_registers=(),
        settings=DEFAULT_SETTINGS,
    )
