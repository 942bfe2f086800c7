from django.contrib import admin
from .models import Recipe, RecipeSection, Ingredient, SectionIngredient

class IngredientInline(admin.TabularInline):
    model = Ingredient
    extra = 1
    fields = ('order_index', 'quantity', 'unit', 'designation')

class RecipeSectionInline(admin.StackedInline):
    model = RecipeSection
    extra = 0

class SectionIngredientInline(admin.TabularInline):
    model = SectionIngredient
    extra = 1

    def formfield_for_foreignkey(self, db_field, request, **kwargs):
        # Ne propose que les ingrédients de la recette de la section éditée
        if db_field.name == "ingredient":
            object_id = request.resolver_match.kwargs.get("object_id") if request.resolver_match else None
            if object_id:
                section = RecipeSection.objects.filter(pk=object_id).first()
                if section:
                    kwargs["queryset"] = Ingredient.objects.filter(recipe=section.recipe)
        return super().formfield_for_foreignkey(db_field, request, **kwargs)

class RecipeAdmin(admin.ModelAdmin):
    inlines = [IngredientInline, RecipeSectionInline]
    list_display = ('title', 'category', 'servings', 'id')
    search_fields = ('title', 'category')
    list_filter = ('category',)

class RecipeSectionAdmin(admin.ModelAdmin):
    inlines = [SectionIngredientInline]
    list_display = ('__str__', 'recipe_title', 'order_index', 'id')

    def recipe_title(self, obj):
        return obj.recipe.title
    recipe_title.short_description = 'Recipe'

class IngredientAdmin(admin.ModelAdmin):
    list_display = ('designation', 'quantity', 'unit', 'recipe_title', 'is_qs', 'id')
    search_fields = ('designation', 'recipe__title')

    def recipe_title(self, obj):
        return obj.recipe.title
    recipe_title.short_description = 'Recipe'

    def is_qs(self, obj):
        return obj.is_qs
    is_qs.boolean = True
    is_qs.short_description = 'QS'

admin.site.register(Recipe, RecipeAdmin)
admin.site.register(RecipeSection, RecipeSectionAdmin)
admin.site.register(Ingredient, IngredientAdmin)
