"""
Built-in landing page content, served for any section the CMS has not filled.
"""

HERO = {
    "title": "Arquitectura contemporanea que inspira",
    "subtitle": "Creamos espacios reales, diseñados a la medida de quienes los habitan.",
    "image_url": "https://images.unsplash.com/photo-1600585154340-be6161a56a0c?auto=format&fit=crop&w=1600&q=80",
}

OBRAS = [
    {
        "caption": "Casa Nordelta",
        "image_url": "https://images.unsplash.com/photo-1613490493576-7fde63acd811?auto=format&fit=crop&w=800&q=80",
    },
    {
        "caption": "Residencia El Naudir",
        "image_url": "https://images.unsplash.com/photo-1512917774080-9991f1c4c750?auto=format&fit=crop&w=800&q=80",
    },
    {
        "caption": "Vivienda Escobar",
        "image_url": "https://images.unsplash.com/photo-1600607687940-47a04b697a7d?auto=format&fit=crop&w=800&q=80",
    },
    {
        "caption": "Casa Benavidez",
        "image_url": "https://images.unsplash.com/photo-1600566753190-17f0bb2a6c3e?auto=format&fit=crop&w=800&q=80",
    },
]

DETALLES = [
    "https://images.unsplash.com/photo-1600585154526-990dced4db0d?auto=format&fit=crop&w=600&q=80",
    "https://images.unsplash.com/photo-1600566753086-00f18fb6b3ea?auto=format&fit=crop&w=600&q=80",
    "https://images.unsplash.com/photo-1600210492486-724fe5c67fb0?auto=format&fit=crop&w=600&q=80",
    "https://images.unsplash.com/photo-1600573472591-ee6b68d14c68?auto=format&fit=crop&w=600&q=80",
]

SERVICIOS = [
    "PROYECTO INTEGRAL DE ARQUITECTURA",
    "DIRECCION Y ADMINISTRACIÓN DE OBRAS",
    "CONSULTORÍA DE DISEÑO Y CONSTRUCCIÓN",
]

CONTACTO = {
    "title": "Comencemos a proyectar",
    "copy": "Estamos listos para escuchar tu idea y transformarla en un espacio concreto.",
    "phone": "+54 9 11 0000 0000",
    "social": ["WhatsApp", "Instagram", "LinkedIn"],
}
