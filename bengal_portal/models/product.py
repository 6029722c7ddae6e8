# bengal_portal/models/product.py

from dataclasses import dataclass


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    description: str
    price: float
    image: str
    category: str

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'price': self.price,
            'image': self.image,
            'category': self.category,
        }


# Fixed catalog; quotes are requested against these ids.
DEFAULT_CATALOG = (
    Product('p1', 'Cooker',
            'Heavy duty commercial 6-burner range with high-output performance and stainless steel finish.',
            1850.00, '/cooker.jpg', 'Cooking Equipment'),
    Product('p2', 'Extraction Hood',
            'Bespoke stainless steel extraction canopy with baffle filters and integrated lighting.',
            1200.00, '/extraction hood.jpg', 'Ventilation'),
    Product('p3', 'Grease Cleaning Service Plan',
            'Professional deep cleaning for commercial extraction systems to ensure fire safety compliance.',
            499.00, '/grease cleaning service plan.jpg', 'Services'),
    Product('p4', 'Hot Cupboard',
            'Stainless steel heated cupboard with sliding doors, perfect for plate warming and food holding.',
            1450.00, '/hot cupboard.jpg', 'Food Holding'),
    Product('p5', 'Stockpot',
            'Single burner high-power stockpot stove designed for heavy industrial use.',
            650.00, '/stockpot.jpg', 'Cooking Equipment'),
    Product('p6', 'Table and Gantry',
            'Custom prep table with integrated overhead gantry system and heating lamps.',
            895.00, '/table and gantry.jpg', 'Food Prep'),
    Product('p7', 'Tandoori Oven',
            'Shaan series professional Tandoori oven with high-grade insulation and precision heat control.',
            1250.00, '/tandoori oven.jpg', 'Cooking Equipment'),
)


def find_product(product_id, catalog=DEFAULT_CATALOG):
    return next((p for p in catalog if p.id == product_id), None)
