import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Recipe",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("category", models.CharField(blank=True, max_length=100, null=True)),
                ("servings", models.PositiveIntegerField(blank=True, help_text="Nombre de couverts pour lequel les quantités sont écrites.", null=True)),
                ("prep_time", models.PositiveIntegerField(blank=True, help_text="Minutes", null=True)),
                ("cook_time", models.PositiveIntegerField(blank=True, help_text="Minutes", null=True)),
                ("notes", models.TextField(blank=True, null=True)),
                ("allergens", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["title", "id"],
            },
        ),
        migrations.CreateModel(
            name="RecipeSection",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(blank=True, max_length=200, null=True)),
                ("instructions", models.TextField(blank=True, null=True)),
                ("order_index", models.PositiveIntegerField(blank=True, null=True)),
                ("recipe", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="sections", to="kitchen_app.recipe")),
            ],
            options={
                "ordering": ["recipe", "order_index", "id"],
            },
        ),
        migrations.CreateModel(
            name="Ingredient",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.FloatField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(0, message="La quantité ne peut pas être négative.")])),
                ("unit", models.CharField(blank=True, max_length=50, null=True)),
                ("designation", models.CharField(blank=True, max_length=255, null=True)),
                ("order_index", models.PositiveIntegerField(blank=True, null=True)),
                ("recipe", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="ingredients", to="kitchen_app.recipe")),
            ],
            options={
                "ordering": ["recipe", "order_index", "id"],
            },
        ),
        migrations.CreateModel(
            name="SectionIngredient",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("order_index", models.PositiveIntegerField(blank=True, null=True)),
                ("ingredient", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="section_links", to="kitchen_app.ingredient")),
                ("section", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="ingredient_links", to="kitchen_app.recipesection")),
            ],
            options={
                "ordering": ["section", "order_index", "id"],
            },
        ),
        migrations.AddConstraint(
            model_name="sectioningredient",
            constraint=models.UniqueConstraint(fields=("section", "ingredient"), name="unique_ingredient_per_section"),
        ),
    ]
