# reset total puis import
# python manage.py seed_yaml --dir kitchen_app/data --mode reset --verbosity 2

# upsert (mise à jour incrémentale)
# python manage.py seed_yaml --dir kitchen_app/data --mode upsert --verbosity 2

from __future__ import annotations
from pathlib import Path
import yaml
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.core.exceptions import ValidationError
from kitchen_app.models import Recipe, RecipeSection, Ingredient, SectionIngredient
from kitchen_app.text_utils import normalize_spaces

class Command(BaseCommand):
    help = "Peuple la base depuis YAML (recipes.yml). Modes: upsert (défaut) ou reset."

    def add_arguments(self, parser):
        parser.add_argument("--dir", required=True, help="Dossier contenant les YAML")
        parser.add_argument("--mode", choices=["upsert", "reset"], default="upsert")
        parser.add_argument("--dry-run", action="store_true")

    # -------------------- Utils lecture --------------------
    def _read_yaml_file(self, base_no_ext: Path, root_key: str | None) -> list[dict]:
        """
        Charge base_no_ext + .yml|.yaml. Accepte:
          - liste top-level
          - dict top-level avec clé `root_key` (ex: {'recipes':[...]}).
        """
        for ext in (".yml", ".yaml"):
            p = base_no_ext.with_suffix(ext)
            if p.exists():
                try:
                    data = yaml.safe_load(p.read_text(encoding="utf-8"))
                except yaml.YAMLError as e:
                    raise CommandError(f"YAML invalide dans {p.name}: {e}")
                if data is None:
                    return []
                if isinstance(data, list):
                    return data
                if isinstance(data, dict):
                    if root_key and root_key in data:
                        return data[root_key] or []
                    # si clé inconnue, retourne le premier bloc liste trouvé
                    for v in data.values():
                        if isinstance(v, list):
                            return v
                    return []
        return []

    # -------------------- RESET --------------------
    def _reset_db(self):
        self.stdout.write("[reset] suppression des relations…")
        SectionIngredient.objects.all().delete()
        RecipeSection.objects.all().delete()
        Ingredient.objects.all().delete()

        self.stdout.write("[reset] suppression des recettes…")
        Recipe.objects.all().delete()
        self.stdout.write(self.style.WARNING("[reset] base vidée"))

    # -------------------- Validation YAML logique --------------------
    def _validate_ing_line(self, rec_title: str, it: dict):
        """ quantity optionnelle (None = pas de quantité fixe) mais numérique et >= 0 si fournie. """
        if not isinstance(it, dict):
            raise CommandError(f"{rec_title}: ligne d'ingrédient invalide -> {it!r}")
        q = it.get("quantity")
        if q is None:
            qf = None
        else:
            try:
                qf = float(q)
            except (TypeError, ValueError):
                raise CommandError(f"{rec_title}: quantity non numérique pour '{it.get('designation')}' -> {q}")
            if qf < 0:
                raise CommandError(f"{rec_title}: quantity doit être >= 0 pour '{it.get('designation')}'.")
        u = it.get("unit")
        if u is not None:
            u = str(u)
        if qf is None and not u and not it.get("designation"):
            raise CommandError(f"{rec_title}: ligne d'ingrédient vide.")
        return qf, u

    # -------------------- UPSERTS --------------------
    def _upsert_recipe_header(self, r: dict) -> Recipe:
        if not r.get("title"):
            raise CommandError(f"Recette sans titre: {r!r}")
        obj = Recipe.objects.filter(title__iexact=normalize_spaces(str(r["title"]))).first()
        payload = dict(
            category=r.get("category"),
            servings=r.get("servings"),
            prep_time=r.get("prep_time"),
            cook_time=r.get("cook_time"),
            notes=r.get("notes"),
            allergens=r.get("allergens"),
        )
        try:
            if obj:
                for k, v in payload.items():
                    setattr(obj, k, v)
                obj.save()
                self.stdout.write(f"[upd] Recipe: {obj.title}")
                return obj
            obj = Recipe.objects.create(title=r["title"], **payload)
        except ValidationError as e:
            raise CommandError(f"{r['title']}: {'; '.join(e.messages)}")
        self.stdout.write(f"[new] Recipe: {obj.title}")
        return obj

    # -------------------- Relations (replace) --------------------
    def _replace_relations(self, rec: Recipe, r: dict):
        """
        Remplace ingrédients et sections. Dans une section, un ingrédient est désigné par sa `key`
        (si fournie dans la liste d'ingrédients) ou par sa désignation (insensible à la casse).
        """
        RecipeSection.objects.filter(recipe=rec).delete()  # supprime aussi les liens (CASCADE)
        Ingredient.objects.filter(recipe=rec).delete()

        by_key: dict[str, Ingredient] = {}
        for index, it in enumerate(r.get("ingredients") or []):
            qf, u = self._validate_ing_line(rec.title, it)
            try:
                ing = Ingredient.objects.create(recipe=rec, quantity=qf, unit=u, designation=it.get("designation"), order_index=index)
            except ValidationError as e:
                raise CommandError(f"{rec.title}: {'; '.join(e.messages)}")
            for ref in (it.get("key"), it.get("designation")):
                if ref:
                    by_key.setdefault(str(ref).strip().lower(), ing)

        for index, s in enumerate(r.get("sections") or []):
            try:
                section = RecipeSection.objects.create(recipe=rec, title=s.get("title"), instructions=s.get("instructions"), order_index=index)
            except ValidationError as e:
                raise CommandError(f"{rec.title}: {'; '.join(e.messages)}")
            for position, ref in enumerate(s.get("ingredients") or []):
                ing = by_key.get(str(ref).strip().lower())
                if not ing:
                    raise CommandError(f"{rec.title}: ingrédient introuvable '{ref}' dans la section '{section}'.")
                try:
                    SectionIngredient.objects.create(section=section, ingredient=ing, order_index=position)
                except ValidationError as e:
                    raise CommandError(f"{rec.title}: {'; '.join(e.messages)}")

    # -------------------- MAIN --------------------
    @transaction.atomic
    def handle(self, *args, **opts):
        base = Path(opts["dir"]).resolve()
        self.stdout.write(f"[seed] data dir: {base}")
        self.stdout.write(f"[seed] exists={base.exists()}")

        recs = self._read_yaml_file(base / "recipes", "recipes")
        self.stdout.write(f"[seed] loaded: recs={len(recs)}")
        if not recs:
            raise CommandError(f"Aucune donnée chargée depuis {base}.")

        if opts["mode"] == "reset":
            self._reset_db()

        for r in recs:
            rec = self._upsert_recipe_header(r)
            self._replace_relations(rec, r)
            self.stdout.write(f"[rel] {rec.title}: {rec.ingredients.count()} ingrédients, {rec.sections.count()} sections")

        if opts.get("dry_run"):
            transaction.set_rollback(True)
            self.stdout.write(self.style.WARNING("Dry-run: rollback effectué, aucune écriture persistée."))
            return

        self.stdout.write(self.style.SUCCESS("Import YAML terminé."))
