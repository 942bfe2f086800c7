from django.db import models
from django.core.validators import MinValueValidator
from django.core.exceptions import ValidationError
from .text_utils import normalize_unit, normalize_spaces
from .utils_pure import is_qs, clamp_servings

def _next_order_index(qs):
    """ max(order_index) + 1 sur le queryset, 0 s'il est vide. """
    current_max = qs.aggregate(models.Max("order_index"))["order_index__max"]
    return 0 if current_max is None else current_max + 1

class Recipe(models.Model):
    # Informations principales
    title = models.CharField(max_length=200)
    category = models.CharField(max_length=100, null=True, blank=True)
    servings = models.PositiveIntegerField(null=True, blank=True, help_text="Nombre de couverts pour lequel les quantités sont écrites.")
    prep_time = models.PositiveIntegerField(null=True, blank=True, help_text="Minutes")
    cook_time = models.PositiveIntegerField(null=True, blank=True, help_text="Minutes")

    # Contenu
    notes = models.TextField(null=True, blank=True)
    allergens = models.TextField(null=True, blank=True)

    # Tracking
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['title', 'id']

    def __str__(self):
        return self.title

    @property
    def base_servings(self) -> int:
        """ Couverts de base pour le scaling : jamais moins de 1. """
        return int(clamp_servings(self.servings))

    def clean(self):
        """ Vérifications métier avant sauvegarde. """
        self.title = normalize_spaces(self.title or "")
        if len(self.title) < 3:
            raise ValidationError("Le titre de la recette doit contenir au moins 3 caractères.")
        if self.category is not None:
            self.category = normalize_spaces(self.category) or None

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

class RecipeSection(models.Model):
    recipe = models.ForeignKey(Recipe, on_delete=models.CASCADE, related_name="sections")
    title = models.CharField(max_length=200, null=True, blank=True)
    instructions = models.TextField(null=True, blank=True)
    order_index = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        ordering = ['recipe', 'order_index', 'id']

    def __str__(self):
        return (self.title or "").strip() or "Sans titre"

    def clean(self):
        recipe = getattr(self, "recipe", None)
        if recipe is None:
            return
        # Nouvelle section sans position : ajoutée à la fin
        if self.order_index is None:
            self.order_index = _next_order_index(RecipeSection.objects.filter(recipe=recipe).exclude(pk=self.pk))

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

class Ingredient(models.Model):
    """ Ligne d'ingrédient d'une recette. `quantity = None` signifie "pas de quantité fixe" (différent de 0). """
    recipe = models.ForeignKey(Recipe, on_delete=models.CASCADE, related_name="ingredients")
    quantity = models.FloatField(null=True, blank=True, validators=[MinValueValidator(0, message="La quantité ne peut pas être négative.")])
    unit = models.CharField(max_length=50, null=True, blank=True)
    designation = models.CharField(max_length=255, null=True, blank=True)
    order_index = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        ordering = ['recipe', 'order_index', 'id']

    def __str__(self):
        quantity = "" if self.quantity is None else f"{self.quantity:g}"
        line = f"{quantity} {self.unit or ''}".strip()
        return f"{line} de {self.designation or '—'} pour {self.recipe.title}".strip()

    @property
    def is_qs(self) -> bool:
        return is_qs(self.unit)

    def clean(self):
        """ Vérifie les règles métier avant sauvegarde. """
        # Normalisation (les chaînes vides deviennent None)
        self.unit = normalize_unit(self.unit) or None
        self.designation = normalize_spaces(self.designation) or None

        if self.quantity is None and not self.unit and not self.designation:
            raise ValidationError("Une ligne d'ingrédient doit avoir au moins une désignation, une quantité ou une unité.")

        recipe = getattr(self, "recipe", None)
        if recipe is not None and self.order_index is None:
            self.order_index = _next_order_index(Ingredient.objects.filter(recipe=recipe).exclude(pk=self.pk))

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

class SectionIngredient(models.Model):
    section = models.ForeignKey(RecipeSection, on_delete=models.CASCADE, related_name="ingredient_links")
    ingredient = models.ForeignKey(Ingredient, on_delete=models.CASCADE, related_name="section_links")
    order_index = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        ordering = ['section', 'order_index', 'id']
        constraints = [models.UniqueConstraint(fields=["section", "ingredient"], name="unique_ingredient_per_section")]

    def __str__(self):
        return f"{self.ingredient.designation or '—'} dans {self.section}"

    def clean(self):
        section = getattr(self, "section", None)
        ingredient = getattr(self, "ingredient", None)
        if section is None or ingredient is None:
            return
        if section.recipe_id != ingredient.recipe_id:
            raise ValidationError("L'ingrédient et la section doivent appartenir à la même recette.")
        if self.order_index is None:
            self.order_index = _next_order_index(SectionIngredient.objects.filter(section=section).exclude(pk=self.pk))

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)
